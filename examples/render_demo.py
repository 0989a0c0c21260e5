"""
mixsig Render Demo

Renders a few signal trees to WAV files and prints some UI-style
curves sampled with contexts. Requires the ``examples`` extra
(soundfile).
"""

import numpy as np
import soundfile as sf
from pathlib import Path

# Add src to path for development
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mixsig import (
    Adsr,
    Biquad,
    Normalized,
    PerCharacterNoise,
    Ramp,
    Sawtooth,
    Sine,
    SignalContext,
    Square,
    Svf,
    Triangle,
    WhiteNoise,
    loads_spec,
)

TREMOLO_PATCH = """
{
    "type": "multiply",
    "a": {"type": "sine", "frequency": 330.0},
    "b": {
        "type": "remap",
        "signal": {"type": "sine", "frequency": 5.0},
        "in_min": -1.0,
        "in_max": 1.0,
        "out_min": 0.2,
        "out_max": 1.0
    }
}
"""


def _write(output_dir: Path, name: str, audio: np.ndarray, sample_rate: int):
    # Normalize to prevent clipping
    peak = np.max(np.abs(audio))
    if peak > 0:
        audio = audio / peak * 0.8

    output_path = output_dir / f"{name}.wav"
    sf.write(str(output_path), audio, sample_rate)
    print(f"  ✓ {name}: {output_path}")


def demo_waveforms(output_dir: Path, sample_rate: int = 8000):
    """Render one second of each oscillator at 220 Hz."""
    print("Rendering oscillators...")

    for osc in (Sine(220.0), Triangle(220.0), Square(220.0, duty=0.3), Sawtooth(220.0)):
        audio = osc.render(1.0, sample_rate=sample_rate)
        _write(output_dir, f"osc_{type(osc).__name__.lower()}", audio, sample_rate)


def demo_filter_sweep(output_dir: Path, sample_rate: int = 8000):
    """Sweep a resonant band-pass over white noise."""
    print("\nRendering filter sweep...")

    noise = WhiteNoise(seed=7, sample_rate=sample_rate, amplitude=0.5)
    cutoff = Ramp(100.0, 1200.0, duration=2.0)
    swept = Svf(noise, cutoff=cutoff, q=4.0, sample_rate=sample_rate, mode="bandpass")
    _write(output_dir, "svf_sweep", swept.render(2.0, sample_rate=sample_rate), sample_rate)

    smooth = Biquad.lowpass(Sawtooth(110.0), 400.0, sample_rate)
    _write(output_dir, "biquad_saw", smooth.render(1.0, sample_rate=sample_rate), sample_rate)


def demo_spec_patch(output_dir: Path, sample_rate: int = 8000):
    """Build a tremolo from a JSON specification."""
    print("\nRendering JSON patch...")

    signal = loads_spec(TREMOLO_PATCH).build()
    _write(output_dir, "tremolo_patch", signal.render(1.5, sample_rate=sample_rate), sample_rate)


def demo_ui_curves():
    """Sample normalized UI curves with contexts."""
    print("\nUI curves:")

    envelope = Adsr(attack=0.1, decay=0.2, sustain=0.6, release=0.3)
    print("  ADSR:", " ".join(f"{envelope.sample(t):.2f}" for t in np.linspace(0.0, 1.0, 11)))

    jitter = Normalized(PerCharacterNoise(seed=42, amplitude=0.1))
    ctx = SignalContext(frame=12, seed=3)
    offsets = [jitter.sample_with_context(0.0, ctx.with_char_index(i)) for i in range(len("mixsig"))]
    print("  Glyph offsets:", " ".join(f"{v:.3f}" for v in offsets))


def main():
    """Run all demos."""
    print("=" * 50)
    print("mixsig Render Demo")
    print("=" * 50)

    # Create output directory
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    sample_rate = 8000

    demo_waveforms(output_dir, sample_rate)
    demo_filter_sweep(output_dir, sample_rate)
    demo_spec_patch(output_dir, sample_rate)
    demo_ui_curves()

    print("\n" + "=" * 50)
    print(f"All demos complete! Output in: {output_dir}")
    print("=" * 50)


if __name__ == "__main__":
    main()
