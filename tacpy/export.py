import _pickle
import bz2
import json
from pathlib import Path
from typing import Any

import numpy as np
import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.dataclasses import dataclass
from scipy.io import savemat
from typing_extensions import Self


def split_complex(values) -> tuple[list, list]:
    values = np.asarray(values, dtype=complex)
    return values.real.tolist(), values.imag.tolist()


@dataclass
class Translation:
    displacement: list[float] = Field(default=[])
    nmax: int = Field(default=0)
    regular: bool = Field(default=True)
    matrix_real: list[list[float]] = Field(default=[])
    matrix_imag: list[list[float]] = Field(default=[])

    @model_validator(mode="after")
    def matching_parts(self) -> Self:
        if len(self.matrix_real) != len(self.matrix_imag):
            raise ValueError(
                f"Real ({len(self.matrix_real)}) and imaginary ({len(self.matrix_imag)}) parts are not compatible"
            )
        return self


@dataclass
class Incident:
    polar_angle: float = Field(default=0.0)
    azimuthal_angle: float = Field(default=0.0)
    coefficients_real: list[float] = Field(default=[])
    coefficients_imag: list[float] = Field(default=[])
    local_coefficients_real: list[list[float]] = Field(default=[])
    local_coefficients_imag: list[list[float]] = Field(default=[])


@dataclass
class Pairwise:
    position: list[list[float]] = Field(default=[])
    blocks_real: list[list[list[list[float]]]] = Field(default=[])
    blocks_imag: list[list[list[list[float]]]] = Field(default=[])


class Export(BaseModel):
    source: str = Field(default="tacpy")
    wavenumber: list[float] = Field(default=[])
    translation: Translation | dict = Field(default={})
    incident: Incident | dict = Field(default={})
    pairwise: Pairwise | dict = Field(default={})

    model_config: ConfigDict = ConfigDict(arbitrary_types_allowed=True)

    def model_post_init(self, __context: Any) -> None:
        if isinstance(self.translation, dict):
            self.translation = Translation(**self.translation)
        if isinstance(self.incident, dict):
            self.incident = Incident(**self.incident)
        if isinstance(self.pairwise, dict):
            self.pairwise = Pairwise(**self.pairwise)

    def save(self, filename: str | Path) -> None:
        if isinstance(filename, str):
            filename = Path(filename)
        filename.parent.mkdir(parents=True, exist_ok=True)

        match filename.suffix:
            case ".json":
                with open(filename, "w") as f:
                    json.dump(self.model_dump(), f, indent=4)
            case ".yml" | ".yaml":
                with open(filename, "w") as f:
                    yaml.dump(self.model_dump(), f)
            case ".bz2":
                with bz2.BZ2File(filename, "w") as outfile:
                    _pickle.dump(self.model_dump(), outfile)
            case ".mat":
                savemat(filename, self.model_dump())
            case _:
                raise ValueError(f"Unknown file extension {filename.suffix}")

    @classmethod
    def load(cls, filename: str | Path) -> "Export":
        if isinstance(filename, str):
            filename = Path(filename)

        match filename.suffix:
            case ".json":
                with open(filename) as f:
                    data = json.load(f)
            case ".yml" | ".yaml":
                with open(filename) as f:
                    data = yaml.safe_load(f)
            case ".bz2":
                with bz2.BZ2File(filename, "r") as infile:
                    data = _pickle.load(infile)
            case _:
                raise ValueError(f"Cannot load file extension {filename.suffix}")
        return cls(**data)
