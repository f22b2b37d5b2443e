import logging
import subprocess
import sys

logger = logging.getLogger(__name__)


def notify(title: str, message: str):
    """
    Best-effort desktop notification:
    - macOS: AppleScript
    - Windows: win10toast
    - Linux: notify-send if present
    Never raises; failures are logged.
    """
    try:
        if sys.platform == "darwin":
            script = f'display notification "{message}" with title "{title}"'
            subprocess.run(["osascript", "-e", script], check=False)
            return

        if sys.platform.startswith("win"):
            from win10toast import ToastNotifier
            ToastNotifier().show_toast(title, message, duration=5, threaded=True)
            return

        subprocess.run(["notify-send", title, message], check=False)
    except Exception as e:
        logger.info("Desktop notification unavailable: %r", e)
