from .numerics import ln_add_exp, ln_normalize, ln_sum_exp

__version__ = "0.1.0"

__all__ = [
    "ln_add_exp",
    "ln_sum_exp",
    "ln_normalize",
]
