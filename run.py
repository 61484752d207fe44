#!/usr/bin/env python3
"""
Run script for the Whisper-Ollama bridge
"""
from bridge.main import main

if __name__ == "__main__":
    main()
