import json
import logging
import os
from pathlib import Path

import numpy as np
import pandas as pd
import yaml
from pydantic import BaseModel, Field, model_validator
from typing_extensions import Self


class Wavenumber(BaseModel):
    real: float = Field(default=1.0)
    imag: float = Field(default=0.0, ge=0)

    @property
    def value(self) -> complex:
        return complex(self.real, self.imag)


class Displacement(BaseModel):
    r: float = Field(ge=0)
    theta: float = Field(default=0.0, ge=0, le=np.pi)
    phi: float = Field(default=0.0)


class Geometry(BaseModel):
    file: str
    delimiter: str = Field(default=",")
    scale: float = Field(default=1.0, gt=0)


class InitialFieldConfig(BaseModel):
    polar_angle: float = Field(default=0.0)
    azimuthal_angle: float = Field(default=0.0)
    amplitude: list[complex] = Field(default=[0, 1, 0])

    @model_validator(mode="after")
    def three_components(self) -> Self:
        if len(self.amplitude) != 3:
            raise ValueError(
                f"The amplitude needs the components (E_r, E_theta, E_phi), got {len(self.amplitude)}"
            )
        return self


class Output(BaseModel):
    folder: str = Field(default=".")
    filename: str = Field(default="result")
    extension: str = Field(default="json", pattern=r"json|yaml|yml|bz2|mat")


class Parallel(BaseModel):
    n_core: int = Field(default=1, ge=1)


class Job(BaseModel):
    wavenumber: Wavenumber | None = Field(default=None)
    wavelength: float | None = Field(default=None, gt=0)
    nmax: int = Field(default=4, ge=1)
    regular: bool = Field(default=True)
    displacement: Displacement | None = Field(default=None)
    geometry: Geometry | None = Field(default=None)
    initial_field: InitialFieldConfig | None = Field(default=None)
    output: Output = Field(default_factory=Output)
    parallel: Parallel = Field(default_factory=Parallel)

    @model_validator(mode="after")
    def wave_definition(self) -> Self:
        if (self.wavenumber is None) == (self.wavelength is None):
            raise ValueError("Provide either a wavenumber or a wavelength")
        if self.displacement is None and self.geometry is None:
            raise ValueError("Provide a displacement or a particle geometry")
        return self

    @property
    def wave_k(self) -> complex:
        if self.wavenumber is not None:
            return self.wavenumber.value
        return complex(2 * np.pi / self.wavelength)


class Config:
    """Job description read from a json or yaml file.

    Args:
        path_config (str): Path to the config file.
        path_cluster (str, optional): Overrides the particle geometry file of the config.
    """

    config: dict = {}
    path_cluster: str = ""

    def __init__(self, path_config: str, path_cluster: str = ""):
        if not isinstance(path_config, str):
            raise ValueError("The config file path needs to be a string!")
        _path_config = Path(path_config)
        self.file_type = _path_config.suffix
        match self.file_type:
            case ".json":
                with open(path_config) as data:
                    self.config = json.load(data)
            case ".yaml" | ".yml":
                with open(path_config) as data:
                    self.config = yaml.safe_load(data)
            case _:
                raise ValueError(
                    "The provided config file needs to be a json or yaml file!"
                )
        if self.config is None:
            raise ValueError(f"Could not read config file {path_config}.")

        self.log = logging.getLogger(self.__class__.__module__)
        self.job = Job(**self.config)

        self.path_cluster = path_cluster
        if self.path_cluster == "" and self.job.geometry is not None:
            self.path_cluster = self.job.geometry.file
        if self.path_cluster and not os.path.isabs(self.path_cluster):
            self.path_cluster = str(_path_config.parent / self.path_cluster)

        self.positions = self.__read_geometry() if self.path_cluster else None
        self.__folder(_path_config.parent)

    def __read_geometry(self) -> np.ndarray:
        delim = self.job.geometry.delimiter if self.job.geometry is not None else ","
        delim = r"\s+" if delim == "whitespace" else delim
        scale = self.job.geometry.scale if self.job.geometry is not None else 1.0
        spheres = pd.read_csv(self.path_cluster, header=None, sep=delim)
        if spheres.shape[1] < 3:
            raise ValueError(
                "The particle geometry file needs at least 3 columns (x, y, z)"
            )
        elif spheres.shape[1] > 3:
            self.log.warning(
                "More than 3 columns have been provided. Everything after the 3rd will be ignored!"
            )
        self.log.info(f"Read {spheres.shape[0]} particle positions, scaled by {scale}")
        return spheres.to_numpy()[:, :3].astype(float) * scale

    def __folder(self, parent: Path):
        folder = self.job.output.folder
        folder = os.sep.join(folder.replace("\\", "/").split("/"))
        if not os.path.isabs(folder):
            folder = str(parent / folder)
        extension = self.job.output.extension
        filename = self.job.output.filename
        filename = f"{filename}.{extension}" if len(filename.split(".")) == 1 else filename
        self.output_filename = os.path.join(folder, filename)
