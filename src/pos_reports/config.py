"""Configuration dataclass and YAML loading for report generation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml

from .formatting import DEFAULT_CURRENCY


@dataclass
class ReportConfig:
    """Settings shared by every generated report and receipt."""

    currency: str = DEFAULT_CURRENCY
    logo_path: Optional[Path] = None
    out_dir: Path = field(default_factory=lambda: Path("out"))
    default_admin: str = "Admin"

    # Receipt letterhead
    store_name: str = "TJC AUTO SUPPLY"
    store_address: str = "General Hizon Avenue, Santa Lucia, City of San Fernando, Pampanga"
    store_contact: str = "0912 345 6789 | tjcautosupply@gmail.com"

    # Synthetic data for demos
    sample_rows: int = 40
    seed: int = 42

    @classmethod
    def from_yaml(cls, path: Path) -> "ReportConfig":
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        # Convert paths
        if data.get("logo_path"):
            data["logo_path"] = Path(data["logo_path"])
        if "out_dir" in data:
            data["out_dir"] = Path(data["out_dir"])

        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        data = {
            "currency": self.currency,
            "logo_path": str(self.logo_path) if self.logo_path else None,
            "out_dir": str(self.out_dir),
            "default_admin": self.default_admin,
            "store_name": self.store_name,
            "store_address": self.store_address,
            "store_contact": self.store_contact,
            "sample_rows": self.sample_rows,
            "seed": self.seed,
        }
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Path] = None) -> ReportConfig:
    """Load config from path or return default config."""
    if path is None:
        return ReportConfig()
    return ReportConfig.from_yaml(path)
