# -*- coding: utf-8 -*-
"""Simulation trace I/O (.npz) for offline inspection of solved leg chains."""

from __future__ import annotations

import os
from typing import Dict, Sequence

import numpy as np

from .simulation import SpiderFrame


def save_trace_npz(path: str, frames: Sequence[SpiderFrame]) -> None:
    """Save a sequence of frames to a compressed .npz file.

    Arrays:
      times            (F,)
      body_positions   (F,3)
      chain_points     (F,L,N,3)  all legs must share the point count
      targets          (F,L,3)    effective targets
      current_targets  (F,L,3)
      errors           (F,)
      movement_groups  (F,)
      retargeted       (F,L) bool
    """
    if not frames:
        raise ValueError("save_trace_npz() needs at least one frame")

    dir_path = os.path.dirname(path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    n_legs = len(frames[0].chain_points)
    retargeted = np.zeros((len(frames), n_legs), dtype=bool)
    for f, frame in enumerate(frames):
        retargeted[f, np.asarray(frame.retargeted, dtype=np.intp)] = True

    np.savez_compressed(
        path,
        times=np.array([fr.time for fr in frames], dtype=np.float64),
        body_positions=np.stack([fr.body_position for fr in frames], axis=0),
        chain_points=np.stack([np.stack(fr.chain_points, axis=0) for fr in frames], axis=0),
        targets=np.stack([fr.effective_targets for fr in frames], axis=0),
        current_targets=np.stack([fr.current_targets for fr in frames], axis=0),
        errors=np.array([fr.combined_leg_position_error for fr in frames], dtype=np.float64),
        movement_groups=np.array([fr.movement_group for fr in frames], dtype=np.int32),
        retargeted=retargeted,
    )


def load_trace_npz(path: str) -> Dict[str, np.ndarray]:
    with np.load(path) as data:
        return {key: data[key] for key in data.files}
