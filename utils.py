import time
import sys


class ProgressBar:
    """Simple text-based progress indicator for CLI tools."""

    def __init__(self, desc="Processing", stream=None):
        self.desc = desc
        self.steps = 0
        self.stream = stream or sys.stdout
        self.start_time = time.time()
        self.spinner = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
        self.spin_idx = 0

    def __call__(self, message):
        self.update(message)

    def update(self, message):
        """Update the progress display with the current step."""
        self.steps += 1
        self.spin_idx = (self.spin_idx + 1) % len(self.spinner)

        elapsed = time.time() - self.start_time
        spinner = self.spinner[self.spin_idx]

        progress_str = f"\r{spinner} {self.desc} [{self.steps:,}] {elapsed:.1f}s: {message}"
        if len(progress_str) > 100:
            progress_str = progress_str[:97] + "..."

        # Pad to clear previous line
        progress_str = progress_str.ljust(100)

        self.stream.write(progress_str)
        self.stream.flush()

    def finish(self, message="Done!"):
        """Finish the progress display."""
        elapsed = time.time() - self.start_time
        self.stream.write(f"\r✅ {message} ({elapsed:.1f}s)".ljust(100) + "\n")
        self.stream.flush()
