"""
Services

Organization:
    - segmentation/: script to clip-sized segments
    - job_spec/: segment to submission payload
    - infrastructure/veo/: google-genai Veo client
    - infrastructure/orchestration/: registry, progress, dispatch
    - use_cases/: entry points for callers
"""
