"""Overlapping segmentation and triangular cross-fade for REPET extended."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.signal.windows import triang


@dataclass(frozen=True)
class Segment:
    """One analysis segment ``[start, stop)`` in samples."""

    start: int
    stop: int

    @property
    def length(self) -> int:
        return self.stop - self.start


def plan_segments(
    n_samples: int, segment_length: int, segment_step: int
) -> list[Segment]:
    """
    Split ``n_samples`` into overlapping segments.

    Signals shorter than ``segment_length + segment_step`` form one segment.
    Otherwise ``1 + (n_samples - segment_length) // segment_step`` segments
    are produced and the last one is extended to the end of the signal.
    """
    if segment_length < 1 or not 0 < segment_step <= segment_length:
        raise ValueError(
            "segments require 0 < segment_step <= segment_length, "
            f"got step={segment_step}, length={segment_length}"
        )
    if n_samples < segment_length + segment_step:
        return [Segment(0, n_samples)]

    n_segments = 1 + (n_samples - segment_length) // segment_step
    segments = [
        Segment(index * segment_step, index * segment_step + segment_length)
        for index in range(n_segments - 1)
    ]
    segments.append(Segment((n_segments - 1) * segment_step, n_samples))
    return segments


def crossfade_window(overlap: int) -> np.ndarray:
    """Return the symmetric triangular window of length ``2 * overlap``.

    Its rising half ``w[:overlap]`` and falling half ``w[overlap:]`` sum to
    one sample by sample.
    """
    if overlap <= 0:
        return np.zeros(0)
    return triang(2 * overlap)


def overlap_add_segments(
    outputs: Sequence[np.ndarray],
    segments: Sequence[Segment],
    n_samples: int,
    overlap: int,
) -> np.ndarray:
    """
    Blend independently processed segments into one signal.

    Before adding segment ``i > 0``, the first ``overlap`` samples already in
    place are multiplied by the falling half of :func:`crossfade_window`
    and the head of the segment by its rising half.

    Parameters
    ----------
    outputs : sequence of ndarray (segment_length, n_channels)
        Processed segments, in order.
    segments : sequence of Segment
        Segment bounds from :func:`plan_segments`.
    n_samples : int
        Length of the blended signal.
    overlap : int
        Samples shared by two consecutive segments.
    """
    if len(outputs) != len(segments):
        raise ValueError(
            f"got {len(outputs)} outputs for {len(segments)} segments"
        )
    n_channels = outputs[0].shape[1]
    blended = np.zeros((n_samples, n_channels))
    if len(segments) == 1:
        blended[segments[0].start : segments[0].stop] = outputs[0]
        return blended

    window = crossfade_window(overlap)[:, None]
    for index, (segment, output) in enumerate(zip(segments, outputs)):
        if output.shape[0] != segment.length:
            raise ValueError(
                f"segment {index} output has {output.shape[0]} samples, "
                f"expected {segment.length}"
            )
        output = np.array(output, dtype=np.float64, copy=True)
        if index > 0 and overlap > 0:
            head = slice(segment.start, segment.start + overlap)
            blended[head] *= window[overlap:]
            output[:overlap] *= window[:overlap]
        blended[segment.start : segment.stop] += output
    return blended
