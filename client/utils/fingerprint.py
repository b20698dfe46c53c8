import locale
import os
import platform
import shutil
from datetime import datetime

import requests


def get_device_fingerprint() -> dict:
    """设备指纹，服务端用它和 IP 一起做限流 key"""
    cols, rows = shutil.get_terminal_size(fallback=(80, 24))
    try:
        language = locale.getlocale()[0]
    except ValueError:
        language = None
    return {
        "userAgent": requests.utils.default_user_agent(),
        "screen": f"{cols}x{rows}",
        "timezone": datetime.now().astimezone().tzname(),
        "language": language or os.getenv("LANG", "unknown"),
        "platform": platform.system() or "unknown",
    }
