#!/usr/bin/env python
"""
Command-line interface for handsynth.

Examples:
    # Run with default settings (sine tone, defaults from handsynth/data/config.default.yaml)
    python handsynth_cli.py

    # Use the vibrato theremin tone and a wider pitch band from a config file
    python handsynth_cli.py --tone-synth theremin_synth --config my_config.yaml

    # Play a sound file whose speed follows the pitch hand
    python handsynth_cli.py --sound-file loop.wav

    # Log hand features and synth knobs, and save the session
    python handsynth_cli.py --log-hand-features --log-audio-features --save-recording take1.wav
"""

from handsynth.script_utils import main

if __name__ == "__main__":
    main()
