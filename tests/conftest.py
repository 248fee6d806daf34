"""
phonobind Test Configuration

Provides WAV fixtures, a fresh host module per test, and the CLI runner.
"""

import subprocess
import sys
from pathlib import Path
from types import ModuleType

import numpy as np
import pytest
import soundfile as sf

from phonobind.config import BindingConfig

TEST_SAMPLE_RATE = 16000


def run_cli(*args: str, cwd: str | None = None) -> subprocess.CompletedProcess:
    """Run phonobind CLI as subprocess."""
    return subprocess.run(
        [sys.executable, "-m", "phonobind", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
    )


def create_test_wav(path: Path, duration_sec: float = 1.0, n_channels: int = 1) -> np.ndarray:
    """
    Create a valid PCM-16 WAV file for testing.

    Args:
        path: Output path for WAV file
        duration_sec: Duration in seconds
        n_channels: Number of identical channels

    Returns:
        The written samples as float64, shape (n_samples,)
    """
    sr = TEST_SAMPLE_RATE
    t = np.arange(int(sr * duration_sec)) / sr

    # Deterministic test signal: sum of a few sine waves
    samples = (
        0.3 * np.sin(2 * np.pi * 200 * t) +
        0.2 * np.sin(2 * np.pi * 400 * t) +
        0.1 * np.sin(2 * np.pi * 600 * t)
    )

    sf.write(path, np.column_stack([samples] * n_channels), sr, subtype="PCM_16")
    return samples


@pytest.fixture
def test_wav_path(tmp_path) -> Path:
    """Create a simple mono test WAV file and return its path."""
    wav_path = tmp_path / "test_input.wav"
    create_test_wav(wav_path, duration_sec=0.5)
    return wav_path


@pytest.fixture
def stereo_wav_path(tmp_path) -> Path:
    """Create a two-channel test WAV file and return its path."""
    wav_path = tmp_path / "stereo.wav"
    create_test_wav(wav_path, duration_sec=0.25, n_channels=2)
    return wav_path


@pytest.fixture
def host_module() -> ModuleType:
    """Empty module to register test bindings into."""
    return ModuleType("phonobind_test_host")


@pytest.fixture
def config() -> BindingConfig:
    """Configuration with ownership tracking on."""
    return BindingConfig(debug_ownership=True)
