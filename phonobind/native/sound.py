"""
Native Sound functions.

Library Stack:
    - soundfile: audio file I/O (libsndfile-backed)
    - numpy: array operations
    - scipy.signal: resampling and window shapes

Invariants:
    - Sound.z has shape (n_channels, n_samples), float64
    - Functions returning a Sound return a new, caller-owned Sound
    - Sampling frequencies passed to resampling are whole numbers of Hz
"""

from math import gcd
from os import PathLike
from pathlib import Path

import numpy as np
import soundfile as sf
from scipy.signal import get_window, resample_poly

from phonobind.native.enums import (
    ConvolveScaling,
    ConvolveSignalOutsideTimeDomain,
    SoundWindowShape,
)
from phonobind.native.things import Intensity, Sound, Spectrum

EPS = 1e-10  # Fixed epsilon for power thresholding
REFERENCE_PRESSURE_SQUARED = 4e-10  # (20 micropascal)^2


# =============================================================================
# Construction
# =============================================================================


def Sound_create(values, sampling_frequency: float = 44100.0, start_time: float = 0.0) -> Sound:
    """
    New Sound from sample values.

    Args:
        values: 1-D (mono) or 2-D (channels x samples) array-like
        sampling_frequency: Samples per second
        start_time: Time of the domain start

    Raises:
        ValueError: On an empty array, more than two dimensions, or a
            non-positive sampling frequency.
    """
    z = np.array(values, dtype=np.float64, ndmin=2)
    if z.ndim > 2:
        raise ValueError(f"Sound values must be 1- or 2-dimensional, got {z.ndim} dimensions")
    if z.size == 0:
        raise ValueError("Sound values must not be empty")
    if sampling_frequency <= 0:
        raise ValueError(f"Sampling frequency must be positive, got {sampling_frequency}")

    n_channels, n_samples = z.shape
    dx = 1.0 / sampling_frequency
    xmax = start_time + n_samples * dx
    return Sound(
        start_time, xmax, n_samples, dx, start_time + 0.5 * dx,
        1.0, float(n_channels), n_channels, 1.0, 1.0, z,
    )


# =============================================================================
# File I/O
# =============================================================================


def Sound_readFromSoundFile(path: str | PathLike) -> Sound:
    """
    Read any format libsndfile understands.

    Raises:
        RuntimeError: If the file cannot be read (soundfile.LibsndfileError).
    """
    samples, sr = sf.read(path, dtype="float64", always_2d=True)
    sound = Sound_create(samples.T, sr)
    sound.name = Path(path).stem
    return sound


def Sound_saveAsAudioFile(me: Sound, path: str | PathLike, subtype: str = "PCM_16") -> None:
    """
    Write as an audio file; format follows the file extension.

    Note:
        - Hard clips to [-1, 1] before writing
        - No dithering
    """
    clipped = np.clip(me.z.T, -1.0, 1.0)
    sf.write(path, clipped, int(round(1.0 / me.dx)), subtype=subtype)


# =============================================================================
# Queries
# =============================================================================


def Sound_getSamplingFrequency(me: Sound) -> float:
    return 1.0 / me.dx


def Sound_getDuration(me: Sound) -> float:
    return me.xmax - me.xmin


def Sound_getEnergy(me: Sound) -> float:
    """Integral of squared pressure over the domain, averaged over channels."""
    return float(np.sum(me.z ** 2) * me.dx / me.ny)


def Sound_getRootMeanSquare(me: Sound) -> float:
    return float(np.sqrt(np.mean(me.z ** 2)))


# =============================================================================
# Transformations
# =============================================================================


def Sound_convertToMono(me: Sound) -> Sound:
    """New mono Sound; channels are averaged."""
    return Sound_create(me.z.mean(axis=0), 1.0 / me.dx, me.xmin)


def Sound_resample(me: Sound, new_frequency: float) -> Sound:
    """
    Resample with scipy.signal.resample_poly.

    Raises:
        ValueError: If either frequency is not a whole number of Hz.
    """
    sr_from = 1.0 / me.dx
    if not float(new_frequency).is_integer() or abs(sr_from - round(sr_from)) > 1e-6:
        raise ValueError(
            f"Resampling needs whole-Hz frequencies, got {sr_from:g} -> {new_frequency:g}"
        )
    sr_from, sr_to = int(round(sr_from)), int(new_frequency)
    g = gcd(sr_from, sr_to)
    z = resample_poly(me.z, sr_to // g, sr_from // g, axis=1)
    return Sound_create(z, sr_to, me.xmin)


def _window(shape: SoundWindowShape, n: int) -> np.ndarray:
    if shape == SoundWindowShape.PARABOLIC:
        phase = (np.arange(n) + 0.5) / n
        return 1.0 - (2.0 * phase - 1.0) ** 2
    if SoundWindowShape.GAUSSIAN1 <= shape <= SoundWindowShape.GAUSSIAN5:
        rank = shape - SoundWindowShape.GAUSSIAN1 + 1
        return get_window(("gaussian", n / (2.0 * (rank + 1))), n, fftbins=False)
    spec = {
        SoundWindowShape.RECTANGULAR: "boxcar",
        SoundWindowShape.TRIANGULAR: "triang",
        SoundWindowShape.HANNING: "hann",
        SoundWindowShape.HAMMING: "hamming",
        SoundWindowShape.KAISER1: ("kaiser", 2.0 * np.pi),
        SoundWindowShape.KAISER2: ("kaiser", 4.0 * np.pi),
    }[shape]
    return get_window(spec, n, fftbins=False)


def Sound_extractPart(
    me: Sound,
    from_time: float,
    to_time: float,
    window_shape: SoundWindowShape = SoundWindowShape.RECTANGULAR,
    relative_width: float = 1.0,
    preserve_times: bool = False,
) -> Sound:
    """
    Windowed excerpt.

    The window spans [from_time, to_time] widened by `relative_width`
    around its centre. Samples outside the original domain are zero.
    """
    if to_time <= from_time:
        raise ValueError(f"Extraction range is empty: {from_time:g} .. {to_time:g}")
    margin = 0.5 * (relative_width - 1.0) * (to_time - from_time)
    tmin, tmax = from_time - margin, to_time + margin

    first = int(np.ceil((tmin - me.x1) / me.dx))
    last = int(np.floor((tmax - me.x1) / me.dx))
    n = max(last - first + 1, 1)

    z = np.zeros((me.ny, n))
    lo, hi = max(first, 0), min(last, me.nx - 1)
    if lo <= hi:
        z[:, lo - first:hi - first + 1] = me.z[:, lo:hi + 1]
    z *= _window(SoundWindowShape(window_shape), n)

    part = Sound_create(z, 1.0 / me.dx, tmin if preserve_times else 0.0)
    if preserve_times:
        part.x1 = me.x1 + first * me.dx
    return part


def Sounds_convolve(
    me: Sound,
    thee: Sound,
    scaling: ConvolveScaling = ConvolveScaling.PEAK_099,
    signal_outside_time_domain: ConvolveSignalOutsideTimeDomain = ConvolveSignalOutsideTimeDomain.ZERO,
) -> Sound:
    """
    Convolution of two Sounds with equal sampling frequency.

    Channel counts must match, or one of the Sounds must be mono.
    SIMILAR extends `me` periodically instead of with zeros.
    """
    if abs(me.dx - thee.dx) > 1e-12 * me.dx:
        raise ValueError("Sounds must have the same sampling frequency")
    if me.ny != thee.ny and 1 not in (me.ny, thee.ny):
        raise ValueError(f"Channel counts differ: {me.ny} and {thee.ny}")

    n_channels = max(me.ny, thee.ny)
    a = np.broadcast_to(me.z, (n_channels, me.nx))
    b = np.broadcast_to(thee.z, (n_channels, thee.nx))

    pad = thee.nx - 1
    rows = []
    for x, h in zip(a, b):
        if signal_outside_time_domain == ConvolveSignalOutsideTimeDomain.SIMILAR and pad > 0:
            rows.append(np.convolve(np.pad(x, pad, mode="wrap"), h, mode="valid"))
        else:
            rows.append(np.convolve(x, h, mode="full"))
    z = np.array(rows)

    if scaling == ConvolveScaling.INTEGRAL:
        z *= me.dx
    elif scaling == ConvolveScaling.NORMALIZE:
        norm = np.sqrt(np.sum(me.z ** 2) * np.sum(thee.z ** 2))
        if norm > 0:
            z /= norm
    elif scaling == ConvolveScaling.PEAK_099:
        peak = np.max(np.abs(z))
        if peak > 0:
            z *= 0.99 / peak

    return Sound_create(z, 1.0 / me.dx, me.xmin + thee.xmin)


# =============================================================================
# Analysis
# =============================================================================


def Sound_to_Spectrum(me: Sound, fast: bool = True) -> Spectrum:
    """Fourier transform of the channel mean; `fast` pads to a power of two."""
    samples = me.z.mean(axis=0)
    n_fft = 1 << (len(samples) - 1).bit_length() if fast else len(samples)
    spectrum = np.fft.rfft(samples, n=n_fft) * me.dx
    df = 1.0 / (n_fft * me.dx)
    n_bins = len(spectrum)
    return Spectrum(
        0.0, 0.5 / me.dx, n_bins, df, 0.0,
        1.0, 2.0, 2, 1.0, 1.0, np.vstack([spectrum.real, spectrum.imag]),
    )


def Spectrum_to_Sound(me: Spectrum) -> Sound:
    """
    Inverse of Sound_to_Spectrum (up to padding).

    Raises:
        ValueError: If the Spectrum has fewer than two frequency bins.
    """
    if me.nx < 2:
        raise ValueError(f"Spectrum needs at least 2 frequency bins, got {me.nx}")
    n_fft = 2 * (me.nx - 1)
    dt = 1.0 / (n_fft * me.dx)
    samples = np.fft.irfft(me.z[0] + 1j * me.z[1], n=n_fft) / dt
    return Sound_create(samples, 1.0 / dt)


def Sound_to_Intensity(me: Sound, minimum_pitch: float = 100.0, time_step: float | None = None,
                       subtract_mean: bool = True) -> Intensity:
    """
    Intensity contour in dB re 20 micropascal.

    Frames of 3.2 / minimum_pitch seconds, hopped by `time_step`
    (default 0.8 / minimum_pitch).
    """
    if minimum_pitch <= 0:
        raise ValueError(f"Minimum pitch must be positive, got {minimum_pitch}")
    time_step = 0.8 / minimum_pitch if time_step is None else time_step
    frame = max(int(round(3.2 / minimum_pitch / me.dx)), 1)
    hop = max(int(round(time_step / me.dx)), 1)

    samples = me.z.mean(axis=0)
    n_frames = max(1, (len(samples) - frame) // hop + 1)
    values = np.zeros(n_frames)
    for i in range(n_frames):
        chunk = samples[i * hop:i * hop + frame]
        if subtract_mean:
            chunk = chunk - chunk.mean()
        values[i] = 10.0 * np.log10((np.mean(chunk ** 2) + EPS) / REFERENCE_PRESSURE_SQUARED)

    x1 = me.x1 + 0.5 * (frame - 1) * me.dx
    return Intensity(
        me.xmin, me.xmax, n_frames, hop * me.dx, x1,
        1.0, 1.0, 1, 1.0, 1.0, values[None, :],
    )
