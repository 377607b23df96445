import logging
from functools import cached_property

import numpy as np

from tacpy.config import Config
from tacpy.coupling import Coupling
from tacpy.excitation import Excitation
from tacpy.export import Export, Incident, Pairwise, Translation, split_complex
from tacpy.geometry import Spherical
from tacpy.pairwise import pairwise_couplings
from tacpy.session import Session


class TAC:
    """Runs a configured translation job.

    The job computes, depending on the config, the translation matrix for a
    single displacement, the pairwise coupling blocks of a particle geometry and
    the plane wave coefficients about every particle.

    Args:
        path_config (str): Path to a json or yaml config file.
        path_cluster (str, optional): Overrides the geometry file of the config.
    """

    def __init__(self, path_config: str, path_cluster: str = ""):
        self.path_config = path_config
        self.path_cluster = path_cluster
        self.log = logging.getLogger(self.__class__.__module__)

    @cached_property
    def config(self) -> Config:
        return Config(path_config=self.path_config, path_cluster=self.path_cluster)

    def run(self) -> Export:
        job = self.config.job
        wave_k = job.wave_k
        export = Export(wavenumber=[wave_k.real, wave_k.imag])

        with Session():
            if job.displacement is not None:
                self.log.info(f"Translation matrix for {job.displacement} ...")
                displacement = Spherical(
                    job.displacement.r, job.displacement.theta, job.displacement.phi
                )
                matrix = Coupling(
                    displacement, wave_k, job.nmax, job.regular
                ).translation_matrix()
                real, imag = split_complex(matrix)
                export.translation = Translation(
                    displacement=[displacement.r, displacement.theta, displacement.phi],
                    nmax=job.nmax,
                    regular=job.regular,
                    matrix_real=real,
                    matrix_imag=imag,
                )

            positions = self.config.positions
            if positions is not None:
                self.log.info(f"Coupling blocks for {positions.shape[0]} particles ...")
                blocks = pairwise_couplings(
                    positions, wave_k, job.nmax, job.regular, job.parallel.n_core
                )
                real, imag = split_complex(blocks)
                export.pairwise = Pairwise(
                    position=positions.tolist(), blocks_real=real, blocks_imag=imag
                )

            if job.initial_field is not None:
                export.incident = self.__incident(wave_k, positions)

        self.log.info("done")
        return export

    def __incident(self, wave_k: complex, positions: np.ndarray | None) -> Incident:
        field = self.config.job.initial_field
        if wave_k.imag != 0:
            raise ValueError("Plane wave excitation needs a real wavenumber")
        excitation = Excitation(
            "planewave",
            np.asarray(field.amplitude, dtype=complex),
            Spherical(wave_k.real, field.polar_angle, field.azimuthal_angle),
            self.config.job.nmax,
        )
        real, imag = split_complex(excitation.coefficients())
        local_real, local_imag = [], []
        if positions is not None:
            local = [
                excitation.local_coefficients(Spherical.from_cartesian(*position))
                for position in positions
            ]
            local_real, local_imag = split_complex(local)
        return Incident(
            polar_angle=field.polar_angle,
            azimuthal_angle=field.azimuthal_angle,
            coefficients_real=real,
            coefficients_imag=imag,
            local_coefficients_real=local_real,
            local_coefficients_imag=local_imag,
        )

    def save(self, export: Export) -> str:
        export.save(self.config.output_filename)
        self.log.info(f"Results written to {self.config.output_filename}")
        return self.config.output_filename
