"""Online REPET-SIM with a causal, fixed-memory frame buffer."""

from __future__ import annotations

import logging
import math

import numpy as np

from repetkit.analysis.similarity import cross_similarity, local_maxima
from repetkit.configs import RepetConfig
from repetkit.signal.stft import STFTPlan, cutoff_bin

from .buffer import SimilarityBuffer, buffer_length
from .core import (
    BaseStreamingSeparator,
    BatchRequest,
    SeparationOutput,
    StreamingSeparatorState,
)
from .repet_sim import similarity_distance_frames
from .strategies import apply_highpass, mirror_mask, repeating_mask
from .utils import as_channels, validate_sample_rate

LOGGER = logging.getLogger(__name__)


class OnlineRepetSim(BaseStreamingSeparator):
    """Causal REPET-SIM over a sliding history of ``buffer_sec`` seconds.

    Procedure
    ---------
    ```text

       input: frames x_t (window_length, n_channels), t = 0, 1, ...
       for each frame x_t:
           X_t <- FFT(window * x_t); V_t <- |X_t| on bins 0..N/2
           store V_t in slot t mod B of the buffer
           s <- cosine similarity of mean_c V_t to every buffered frame
           J <- local maxima of s (oldest to newest), or {t} if none
           R_t <- min(V_t, median_{j in J} V_j)
           M_t <- (R_t + eps) / (V_t + eps); M_t[1..cutoff] <- 1
           emit real(IFFT(mirror(M_t) * X_t)) / sum(window[::step])
    ```

    Frame ``t`` only reads frames ``<= t``. The emitted blocks are already
    scaled for overlap-add at sample offset ``t * step_length``.
    :meth:`process_stream` prepends ``window_length - step_length`` zeros and
    pads the tail to whole frames, so every sample gets the full overlap-add
    gain, as in the batch STFT.

    One instance is one streaming session and must not be shared between
    threads; :meth:`reset` starts a new session.
    """

    mode = "online"

    def __init__(
        self,
        sample_rate: int,
        n_channels: int = 1,
        config: RepetConfig | None = None,
    ) -> None:
        super().__init__(config)
        self.sample_rate = validate_sample_rate(sample_rate)
        if n_channels < 1:
            raise ValueError(f"n_channels must be >= 1, got {n_channels}")
        self.n_channels = int(n_channels)
        self.plan = STFTPlan.from_sample_rate(self.sample_rate, self.config.window_sec)
        self.capacity = buffer_length(self.config.buffer_sec, self.sample_rate, self.plan)
        self.distance = similarity_distance_frames(
            self.config.similarity_distance_sec, self.sample_rate, self.plan.step_length
        )
        self.cutoff = cutoff_bin(self.plan, self.sample_rate, self.config.cutoff_hz)
        self.buffer = SimilarityBuffer(self.plan.n_freq, self.capacity, self.n_channels)

    @property
    def frame_index(self) -> int:
        return self.buffer.frame_index

    def reset(self) -> None:
        """Discard the buffered history."""
        self.buffer.reset()

    def get_state(self) -> StreamingSeparatorState:
        return StreamingSeparatorState(
            buffer=self.buffer.magnitudes.copy(),
            mean_spectra=self.buffer.mean_spectra.copy(),
            frame_index=self.buffer.frame_index,
            metadata={"capacity": self.capacity},
        )

    def set_state(self, state: StreamingSeparatorState) -> None:
        if state.buffer is None or state.mean_spectra is None:
            raise ValueError("state must carry buffer and mean_spectra arrays")
        if state.buffer.shape != self.buffer.magnitudes.shape:
            raise ValueError(
                f"state buffer shape {state.buffer.shape} does not match "
                f"{self.buffer.magnitudes.shape}"
            )
        self.buffer.magnitudes[...] = state.buffer
        self.buffer.mean_spectra[...] = state.mean_spectra
        self.buffer.frame_index = int(state.frame_index)

    def _check_frame(self, frame: np.ndarray) -> np.ndarray:
        frame = np.asarray(frame, dtype=np.float64)
        if frame.ndim == 1 and self.n_channels == 1:
            frame = frame[:, None]
        expected = (self.plan.window_length, self.n_channels)
        if frame.shape != expected:
            raise ValueError(
                f"frame must be shaped {expected} for this session, got {frame.shape}"
            )
        return frame

    def process_frame(self, frame: np.ndarray) -> np.ndarray:
        """Separate one raw ``(window_length, n_channels)`` frame."""
        frame = self._check_frame(frame)
        spectrum = np.fft.fft(frame * self.plan.window_samples[:, None], axis=0)
        magnitudes = np.abs(spectrum[: self.plan.n_freq])

        slot = self.buffer.push(magnitudes)
        slots = self.buffer.chronological_slots()
        similarity = cross_similarity(
            self.buffer.mean_spectra[:, slots], self.buffer.mean_spectra[:, slot]
        )
        _, picked = local_maxima(
            similarity,
            self.config.similarity_threshold,
            self.distance,
            self.config.similarity_number,
        )
        neighbors = slots[picked] if picked.size else np.array([slot])

        mask = repeating_mask(magnitudes, self.buffer.median(neighbors))
        mask = apply_highpass(mask, self.cutoff)
        background = np.real(np.fft.ifft(mirror_mask(mask) * spectrum, axis=0))
        return background / self.plan.window_gain

    def process_stream(
        self,
        audio: np.ndarray,
        *,
        request: BatchRequest | None = None,
    ) -> SeparationOutput:
        """Run a whole signal through a fresh session, frame by frame."""
        request_obj = request if request is not None else BatchRequest()
        channels, squeeze = as_channels(audio)
        if channels.shape[1] != self.n_channels:
            raise ValueError(
                f"audio has {channels.shape[1]} channel(s), "
                f"session expects {self.n_channels}"
            )
        n_samples = channels.shape[0]
        window_length = self.plan.window_length
        step = self.plan.step_length
        head = window_length - step
        n_frames = int(math.ceil((head + n_samples) / step))

        padded = np.zeros(((n_frames - 1) * step + window_length, self.n_channels))
        padded[head : head + n_samples] = channels
        background = np.zeros_like(padded)

        self.reset()
        for frame_index in range(n_frames):
            start = frame_index * step
            background[start : start + window_length] += self.process_frame(
                padded[start : start + window_length]
            )
            if (frame_index + 1) % 64 == 0 or frame_index + 1 == n_frames:
                request_obj.report("frames", (frame_index + 1) / n_frames)
        LOGGER.info(
            "Processed %d frame(s) with a %d-frame buffer", n_frames, self.capacity
        )

        background = background[head : head + n_samples]
        return SeparationOutput(
            estimate_time=background[:, 0] if squeeze else background,
            state=self.get_state(),
            metadata={
                "mode": self.mode,
                "n_frames": n_frames,
                "buffer_length": self.capacity,
                "window_length": window_length,
                "step_length": step,
            },
        )

    def forward(
        self,
        audio: np.ndarray,
        *,
        request: BatchRequest | None = None,
    ) -> SeparationOutput:
        """Torch-like forward alias for :meth:`process_stream`."""
        return self.process_stream(audio, request=request)
