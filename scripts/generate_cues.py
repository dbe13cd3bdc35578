#!/usr/bin/env python3
"""Write Cadence's built-in cue chimes to WAV files.

The files are a starting point for custom cues: edit them, then list them
under ``cadence.cues.sounds`` in a config file.

Usage:
    python scripts/generate_cues.py [OUTPUT_DIR]
"""

import sys
import wave
from pathlib import Path

from cadence.cues import CueType
from cadence.cues.player import CHIME_NOTES, generate_chime


def save_wav(audio_data: bytes, path: Path, sample_rate: int = 22050) -> None:
    """Save audio data as WAV file."""
    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(audio_data)


def main() -> None:
    """Generate one WAV file per cue."""
    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("sounds")
    output_dir.mkdir(parents=True, exist_ok=True)

    sample_rate = 22050
    for cue in CueType:
        path = output_dir / f"{cue.value}.wav"
        save_wav(generate_chime(CHIME_NOTES[cue], sample_rate), path, sample_rate)
        print(f"  Created: {path}")

    print(f"\nAdd to your config:\n  cadence:\n    cues:\n      sounds_dir: {output_dir}")
    print("      sounds:")
    for cue in CueType:
        print(f"        {cue.value}: {cue.value}.wav")


if __name__ == "__main__":
    main()
