from PySide6.QtCore import QThread, Signal

from chronos.core.report_client import MissingCredential, ReportClient, ReportError


class ReportWorker(QThread):
    """
    Runs one blocking ReportClient call off the GUI thread.
    `job` is "polish" (payload: note text) or "report" (payload: SessionSnapshot).
    error carries (kind, message) where kind is "missing_key" or "api".
    """
    result = Signal(str)
    error = Signal(str, str)

    def __init__(self, client: ReportClient, job: str, payload):
        super().__init__()
        if job not in ("polish", "report"):
            raise ValueError(f"Unknown job: {job}")
        self.client = client
        self.job = job
        self.payload = payload
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def run(self):
        try:
            if self.job == "polish":
                text = self.client.polish(self.payload)
            else:
                text = self.client.generate_report(self.payload)
            if not self._cancelled:
                self.result.emit(text)
        except MissingCredential as e:
            if not self._cancelled:
                self.error.emit("missing_key", str(e))
        except (ReportError, OSError) as e:
            if not self._cancelled:
                self.error.emit("api", str(e))
