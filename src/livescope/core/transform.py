"""
Per-block feature extraction.

Turns one block of mono samples into the scalar features shown live:
RMS amplitude, dominant frequency, and a banded log-magnitude spectrum.

Everything here is a pure function of its inputs except the band smoothing
carry-over held by :class:`BlockTransform`. Bin-to-Hz mapping always uses the
number of samples actually transformed, so a short final block of a track
reports correct frequencies.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from scipy import fft as scipy_fft

from livescope.config import AnalysisConfig

# Peak magnitude at or below this counts as "no energy".
ENERGY_FLOOR = 1e-12


@dataclass
class BlockFeatures:
    """Features computed from one block."""

    rms: float
    frequency: float        # Hz, 0.0 when the block carries no energy
    bands: np.ndarray       # (band_count,) non-negative
    frames: int             # samples actually analysed


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------

def rms(samples: np.ndarray) -> float:
    """Root-mean-square amplitude; 0.0 for an empty block."""
    if samples.size == 0:
        return 0.0
    x = np.asarray(samples, dtype=np.float64)
    return float(np.sqrt(np.mean(x * x)))


def magnitude_spectrum(samples: np.ndarray) -> np.ndarray:
    """
    Magnitudes of the first N/2 FFT bins of a real signal.

    Args:
        samples: 1-D real samples, length N.

    Returns:
        Array of length N // 2 (empty for N < 2).
    """
    n = samples.size
    if n < 2:
        return np.zeros(0, dtype=np.float64)
    spectrum = scipy_fft.fft(np.asarray(samples, dtype=np.float64))
    return np.abs(spectrum[: n // 2])


def dominant_frequency(magnitudes: np.ndarray, sample_rate: int, n: int) -> float:
    """
    Frequency of the strongest bin.

    Args:
        magnitudes: Output of :func:`magnitude_spectrum`.
        sample_rate: Sample rate in Hz.
        n: Number of samples that went into the transform.

    Returns:
        ``argmax * sample_rate / n``; 0.0 when there is no energy.
    """
    if magnitudes.size == 0 or n <= 0:
        return 0.0
    peak = int(np.argmax(magnitudes))
    if magnitudes[peak] <= ENERGY_FLOOR:
        return 0.0
    return peak * sample_rate / n


def band_edges(n_bins: int, band_count: int) -> List[Tuple[int, int]]:
    """
    Split ``n_bins`` bins into ``band_count`` contiguous [start, stop) groups.

    Each group is ``n_bins // band_count`` wide and the last group takes the
    remainder. With fewer bins than bands, the first bands get one bin each
    and the rest are empty. Every bin lands in exactly one group.
    """
    if band_count <= 0:
        return []
    if n_bins < band_count:
        return [(i, i + 1) if i < n_bins else (n_bins, n_bins) for i in range(band_count)]

    width = n_bins // band_count
    edges = [(i * width, (i + 1) * width) for i in range(band_count)]
    edges[-1] = (edges[-1][0], n_bins)
    return edges


def band_spectrum(
    magnitudes: np.ndarray,
    band_count: int,
    scale: float = 100.0,
    epsilon: float = 1e-6,
) -> np.ndarray:
    """
    Average log-magnitude per band.

    Args:
        magnitudes: Bin magnitudes.
        band_count: Number of output bands.
        scale: Divisor bringing log10 values into display range.
        epsilon: Added to magnitudes before log10.

    Returns:
        Array of ``band_count`` values, negatives clamped to 0.
    """
    bands = np.zeros(band_count, dtype=np.float64)
    if magnitudes.size == 0:
        return bands

    log_mag = np.log10(magnitudes + epsilon)
    for i, (start, stop) in enumerate(band_edges(magnitudes.size, band_count)):
        if stop > start:
            bands[i] = np.mean(log_mag[start:stop]) / scale

    return np.maximum(bands, 0.0)


def smooth_bands(
    current: np.ndarray,
    previous: Optional[np.ndarray],
    weight: float = 0.5,
) -> np.ndarray:
    """
    Blend each band with its left neighbour's previous value.

    ``out[i] = (current[i] + weight * previous[i - 1]) / (1 + weight)`` for
    ``i >= 1``; band 0 passes through. No-op without a matching previous.
    """
    if previous is None or previous.shape != current.shape or current.size < 2:
        return current.copy()

    out = current.copy()
    out[1:] = (current[1:] + weight * previous[:-1]) / (1.0 + weight)
    return out


# ---------------------------------------------------------------------------
# Stateful wrapper
# ---------------------------------------------------------------------------

class BlockTransform:
    """
    Applies the full per-block feature extraction.

    Holds the previous block's smoothed bands; call :meth:`reset` between
    tracks so one track's spectrum does not bleed into the next.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None, smoothing: bool = True):
        """
        Initialize the transform.

        Args:
            config: Analysis configuration (band count, scale, smoothing).
            smoothing: Apply temporal band smoothing.
        """
        self.config = config or AnalysisConfig()
        self.smoothing = smoothing
        self._previous: Optional[np.ndarray] = None

    def reset(self) -> None:
        """Forget smoothing carry-over."""
        self._previous = None

    def apply(self, samples: np.ndarray, sample_rate: Optional[int] = None) -> BlockFeatures:
        """
        Extract features from one mono block.

        Args:
            samples: 1-D samples; may be shorter than the nominal block size.
            sample_rate: Rate of ``samples``; defaults to the configured rate.

        Returns:
            BlockFeatures for the block.
        """
        cfg = self.config
        sr = sample_rate or cfg.sample_rate
        n = int(samples.size)

        magnitudes = magnitude_spectrum(samples)
        bands = band_spectrum(magnitudes, cfg.band_count, cfg.log_scale, cfg.epsilon)
        if self.smoothing:
            bands = smooth_bands(bands, self._previous, cfg.smoothing_weight)
            self._previous = bands

        return BlockFeatures(
            rms=rms(samples),
            frequency=dominant_frequency(magnitudes, sr, n),
            bands=bands,
            frames=n,
        )

    __call__ = apply
