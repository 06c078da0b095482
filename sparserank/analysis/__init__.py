from ._wilcoxon import WilcoxonResult, wilcoxon_test

__all__ = [
    "WilcoxonResult",
    "wilcoxon_test",
]
