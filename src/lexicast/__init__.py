"""
Lexicast - bilingual learning material from online videos.

A pipeline for:
- Probing video metadata and native chapters with yt-dlp
- Extracting the best audio stream to a scratch file
- Uploading the audio to Gemini and waiting until it is ready
- Generating timed English/Chinese segments, chapters and vocabulary lists
- Validating the model response and reclaiming every temporary resource
"""

__version__ = "0.1.0"
