"""
Input/Output Manager (HDF5)
Handles saving and loading ensemble snapshots to .h5 files.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import os
from typing import Any, Dict, List, Optional
from importlib.metadata import version, PackageNotFoundError

import h5py
import numpy as np

from vicsek.model.borders import Border
from vicsek.model.particle import Particle, particles_from_arrays, particles_to_arrays

logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("vicsek")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


@dataclass
class Snapshot:
    """Particles and border read back from a snapshot file."""
    particles: List[Particle]
    border: Optional[Border] = None
    attrs: Dict[str, Any] = field(default_factory=dict)
    version: str = APP_VERSION


class IOManager:

    @staticmethod
    def save_snapshot(
        filepath: str,
        particles: List[Particle],
        border: Optional[Border] = None,
        attrs: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Write the ensemble to an HDF5 file, overwriting it.

        Args:
            filepath: Target .h5 path.
            particles: Particles to store (positions and velocities).
            border: Optional border, stored as JSON with its policy.
            attrs: Extra scalar metadata (noise, step, ...), stored as file attributes.
        """
        logger.info(f"Saving snapshot of {len(particles)} particles to: {filepath}")
        positions, velocities = particles_to_arrays(particles)
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION
                if border is not None:
                    f.attrs["border_json"] = json.dumps(border.to_dict())

                grp_attrs = f.create_group("attrs")
                for key, val in (attrs or {}).items():
                    grp_attrs.attrs[key] = val

                grp_ens = f.create_group("ensemble")
                grp_ens.create_dataset("positions", data=positions, compression="gzip")
                grp_ens.create_dataset("velocities", data=velocities, compression="gzip")
                grp_ens.create_dataset(
                    "ids",
                    data=np.array([-1 if p.id is None else p.id for p in particles], dtype=np.int64)
                )
            logger.info(f"Snapshot saved to: {filepath}")

        except Exception as e:
            logger.exception(f"Failed to save snapshot: {e}")
            raise

    @staticmethod
    def load_snapshot(filepath: str) -> Snapshot:
        logger.info(f"Loading snapshot from: {filepath}")
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Snapshot file not found: {filepath}")
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        try:
            with h5py.File(filepath, "r") as f:
                file_version = str(f.attrs.get("version", "unknown"))
                if file_version != APP_VERSION:
                    logger.warning(f"Snapshot version {file_version} differs from {APP_VERSION}.")

                border = None
                if "border_json" in f.attrs:
                    border = Border.from_dict(json.loads(f.attrs["border_json"]))

                attrs: Dict[str, Any] = {}
                if "attrs" in f:
                    for key, val in f["attrs"].attrs.items():
                        # numpy scalars -> plain python values
                        attrs[key] = val.item() if isinstance(val, np.generic) else val

                positions = f["ensemble/positions"][()]
                velocities = f["ensemble/velocities"][()]
                ids = f["ensemble/ids"][()] if "ensemble/ids" in f else None

            particles = particles_from_arrays(positions, velocities)
            if ids is not None:
                for p, pid in zip(particles, ids):
                    p.id = None if pid < 0 else int(pid)

            logger.info(f"Loaded {len(particles)} particles.")
            return Snapshot(particles=particles, border=border, attrs=attrs, version=file_version)

        except Exception as e:
            logger.exception(f"Failed to load snapshot: {e}")
            raise
