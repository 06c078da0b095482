"""Configuration classes for rank-sum testing.

Provides serialization, validation, and type constraints for run settings.
"""

import inspect
import json
from pathlib import Path
from typing import Any

from typing_extensions import Self


# Allowed basic types for config values
BASIC_TYPES = (int, float, str, bool, type(None))

# Accepted spellings of the alternative hypothesis, mapped to canonical names
ALTERNATIVES = {
    "two_sided": "two_sided",
    "two-sided": "two_sided",
    "two.sided": "two_sided",
    "greater": "greater",
    "less": "less",
}

BACKENDS = ("auto", "numba", "python")


def normalize_alternative(alternative: str) -> str:
    """Map an alternative hypothesis name to its canonical spelling.

    Raises
    ------
    ValueError
        If ``alternative`` is not one of two_sided/greater/less (or an alias).
    """
    try:
        return ALTERNATIVES[alternative]
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown alternative {alternative!r}. "
            f"Expected one of: 'two_sided', 'greater', 'less'"
        ) from None


class Config:
    """Base class for configurations.

    Enforces type constraints and provides serialization capabilities.

    Rules:
    - Non-private attributes (not starting with '_') must be basic types
    - Basic types: int, float, str, bool, None, or nested dict/list of these
    - Provides to_dict(), save(), and load() methods
    """

    def __setattr__(self, name: str, value: Any) -> None:
        """Validate attribute types before setting."""
        if not name.startswith("_"):
            self._validate_value(value, name)

        super().__setattr__(name, value)

    @staticmethod
    def _validate_value(value: Any, name: str = "value") -> None:
        """Recursively validate that value is serializable.

        Raises
        ------
        TypeError
            If value contains non-serializable types.
        """
        if isinstance(value, BASIC_TYPES):
            return

        if isinstance(value, list):
            for i, item in enumerate(value):
                Config._validate_value(item, f"{name}[{i}]")
            return

        if isinstance(value, dict):
            for key, val in value.items():
                if not isinstance(key, str):
                    raise TypeError(
                        f"Dict keys must be strings, got {type(key).__name__} for key in {name}"
                    )
                Config._validate_value(val, f"{name}['{key}']")
            return

        raise TypeError(
            f"Attribute '{name}' has invalid type {type(value).__name__}. "
            f"Only basic types (int, float, str, bool, None) and nested "
            f"dict/list are allowed."
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary.

        Only includes public attributes (not starting with '_').
        """
        return {
            key: json.loads(json.dumps(value))
            for key, value in self.__dict__.items()
            if not key.startswith("_") and not callable(value)
        }

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file, overwriting any existing file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any], strict: bool = True) -> Self:
        """Create config from dictionary.

        Inspects ``__init__`` to fill missing keys with defaults.

        Parameters
        ----------
        config_dict : dict[str, Any]
            Configuration dictionary.
        strict : bool, default=True
            If True, unknown keys raise ``ValueError``. If False they are ignored.

        Raises
        ------
        ValueError
            If a required parameter is missing, or (strict) an unknown key is given.
        """
        sig = inspect.signature(cls.__init__)
        params = {
            name: param
            for name, param in sig.parameters.items()
            if name not in ("self", "args", "kwargs")
        }

        unknown = sorted(set(config_dict) - set(params))
        if strict and unknown:
            raise ValueError(f"Unknown parameters for {cls.__name__}: {unknown}")

        init_kwargs = {}
        missing_required = []
        for name, param in params.items():
            if name in config_dict:
                init_kwargs[name] = config_dict[name]
            elif param.default is inspect.Parameter.empty:
                missing_required.append(name)

        if missing_required:
            raise ValueError(
                f"Missing required parameters for {cls.__name__}: {missing_required}"
            )

        return cls(**init_kwargs)

    @classmethod
    def load(cls, path: str | Path, strict: bool = True) -> Self:
        """Load config from JSON file, filling missing keys with defaults.

        Raises
        ------
        FileNotFoundError
            If config file doesn't exist.
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)

        return cls.from_dict(config_dict, strict=strict)

    def update(self, **kwargs) -> Self:
        """Return a copy with the given attributes replaced and re-validated."""
        merged = self.to_dict()
        merged.update(kwargs)
        return self.from_dict(merged)

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"{self.__class__.__name__}({items})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Config):
            return False
        return type(self) is type(other) and self.to_dict() == other.to_dict()


class WilcoxonConfig(Config):
    """Settings for :func:`sparserank.wilcoxon_test`.

    Parameters
    ----------
    alternative : str, default="two_sided"
        Alternative hypothesis: ``"two_sided"``, ``"greater"`` or ``"less"``.
        ``"greater"`` tests whether a group ranks higher than the rest.
    axis : int, default=0
        Axis holding observations. 0: observations are rows (cells x genes).
        1: observations are columns (genes x cells).
    backend : str, default="auto"
        Kernel backend: ``"auto"``, ``"numba"`` or ``"python"``.
    n_threads : int, default=-1
        Threads for the Numba backend. -1 uses all available threads.
    copy_input : bool, default=False
        Copy the caller's values (dense or sparse) before testing. Ranks are
        always written to new arrays, so the input is never modified either way.

    Examples
    --------
    >>> config = WilcoxonConfig(alternative="greater", backend="python")
    >>> config.save("wilcoxon.json")
    >>> WilcoxonConfig.load("wilcoxon.json") == config
    True
    """

    def __init__(
        self,
        alternative: str = "two_sided",
        axis: int = 0,
        backend: str = "auto",
        n_threads: int = -1,
        copy_input: bool = False,
    ):
        if axis not in (0, 1):
            raise ValueError(f"axis must be 0 or 1, got {axis!r}")
        if backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {backend!r}")
        if not isinstance(n_threads, int) or isinstance(n_threads, bool):
            raise TypeError(f"n_threads must be an integer, got {type(n_threads).__name__}")
        if n_threads == 0 or n_threads < -1:
            raise ValueError(f"n_threads must be -1 or positive, got {n_threads}")

        self.alternative = normalize_alternative(alternative)
        self.axis = axis
        self.backend = backend
        self.n_threads = n_threads
        self.copy_input = bool(copy_input)
