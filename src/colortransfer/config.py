"""Run parameters for color transfer and colorization."""

from dataclasses import asdict, dataclass, replace

from .colorization import DEFAULT_PATCH_SIZE, DEFAULT_SAMPLES
from .colorspaces import COLORSPACES, DEFAULT_COLORSPACE


@dataclass(frozen=True)
class TransferConfig:
    """
    Parameters shared by both pipelines.

    Attributes:
        colorspace: registered Lαβ colorspace name (log base)
        display_min: lowest output component
        display_max: highest output component; None means the maximum of the
            output component type
        samples: sample bank size for colorization
        patch_size: half-width of the colorization signature window
        seed: random seed for sample drawing; None is nondeterministic
    """

    colorspace: str = DEFAULT_COLORSPACE
    display_min: float = 0.0
    display_max: float | None = None
    samples: int = DEFAULT_SAMPLES
    patch_size: int = DEFAULT_PATCH_SIZE
    seed: int | None = None

    def validate(self) -> "TransferConfig":
        if self.colorspace not in COLORSPACES:
            raise ValueError(
                f"Unknown colorspace '{self.colorspace}'. Available: {list(COLORSPACES.keys())}"
            )
        if self.display_min < 0.0:
            raise ValueError(f"display_min must be non-negative, got {self.display_min}")
        if self.display_max is not None and not self.display_min < self.display_max:
            raise ValueError(
                f"display_min must be below display_max, got [{self.display_min}, {self.display_max}]"
            )
        if self.samples < 1:
            raise ValueError(f"Sample count must be at least 1, got {self.samples}")
        if self.patch_size < 1:
            raise ValueError(f"Patch size must be at least 1, got {self.patch_size}")
        return self

    def resolve_display_max(self, max_component: int) -> float:
        display_max = float(max_component) if self.display_max is None else self.display_max
        if display_max > max_component:
            raise ValueError(
                f"display_max {display_max} exceeds the component maximum {max_component}"
            )
        return display_max

    def as_dict(self) -> dict:
        return asdict(self)


def create_transfer_config(**overrides) -> TransferConfig:
    """
    Build a validated TransferConfig.

    Keys left out or set to None keep their defaults, except ``display_max``
    and ``seed`` for which None is meaningful.
    """
    nullable = {"display_max", "seed"}
    params = {k: v for k, v in overrides.items() if v is not None or k in nullable}
    return replace(TransferConfig(), **params).validate()
