"""
Core Module

Shared components used by every maintenance script:
- Configuration management
- Logging configuration
- Configuration errors
"""
