"""
Marker pipeline stages, leaves first:
media -> transcription -> analysis -> script_generation -> images/audio -> slides
-> subtitles -> assembly -> markers
"""
