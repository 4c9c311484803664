"""Mac OS 9 appliance installer (Python-first, idempotent).

Core design goals:
- Every step checks current state and converges it
- User data (config, disks, media, screenshots) survives updates
- A supervised emulator session that never exposes the host desktop
- Centralized logging
"""

__all__ = []
