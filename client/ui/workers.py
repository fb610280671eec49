"""
Background worker threads for the tray client.
"""

from PyQt6.QtCore import QThread, pyqtSignal

from client.utils.logger import logger


class TaskWorker(QThread):
    """Worker thread for running a blocking call off the GUI thread.

    The task receives a progress callback as its first argument; calling it
    from the worker emits progress_changed on the GUI thread.
    """

    task_done = pyqtSignal(bool, str, object)  # success, error, result (exception on failure)
    progress_changed = pyqtSignal(int, int)  # done, total

    def __init__(self, func, *args, **kwargs):
        super().__init__()
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def report_progress(self, done: int, total: int):
        self.progress_changed.emit(done, total)

    def run(self):
        """Run the task and report the outcome."""
        try:
            result = self.func(self.report_progress, *self.args, **self.kwargs)
            self.task_done.emit(True, "", result)
        except Exception as e:
            logger.debug(f"Worker task raised {type(e).__name__}: {e}")
            self.task_done.emit(False, str(e), e)
