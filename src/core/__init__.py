"""
Core numerical primitives and value types.

Модули этого пакета не зависят от поиска корней и специальных функций:
- math: толерантности, итерация, ряды, дроби, квадратуры
- domain: Probability
"""
