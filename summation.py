"""Three ways to sum the integers from 1 to n.

For negative n the sum runs from n up to -1, so ``sum_to_n(-5) == -15``.
"""


def sum_to_n_a(n: int) -> int:
    """Closed form (Gauss): n * (n + 1) / 2, mirrored for negative n."""
    if n < 0:
        return -sum_to_n_a(-n)
    return n * (n + 1) // 2


def sum_to_n_b(n: int) -> int:
    """Iterative."""
    total = 0
    if n >= 0:
        for i in range(1, n + 1):
            total += i
    else:
        for i in range(n, 0):
            total += i
    return total


def sum_to_n_c(n: int) -> int:
    """Recursive. Bounded by the interpreter's recursion limit."""
    if n == 0:
        return 0
    if n > 0:
        return n + sum_to_n_c(n - 1)
    return n + sum_to_n_c(n + 1)
