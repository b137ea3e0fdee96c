"""
GenovaAI image generation package.

Provides:
- FastAPI proxy that forwards prompts to an image-generation API
- Prompt submission client (library + CLI) for the proxy
"""
