import time


def get_confirmation(prompt="Continue? (y/n): "):
    """
    Prompts the user for confirmation (yes or no).

    Args:
        prompt (str): The confirmation prompt to display (default: "Continue? (y/n): ")

    Returns:
        bool: True if user confirms (yes), False otherwise.
    """
    while True:
        answer = input(prompt).strip().lower()
        if answer in ["y", "yes"]:
            return True
        elif answer in ["n", "no"]:
            return False
        else:
            print("Invalid input. Please enter 'y' or 'n'.")


class Stopwatch:
    started_at: float

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self.started_at = clock()
        self._lap_started_at = self.started_at

    def elapsed(self) -> float:
        return self._clock() - self.started_at

    def lap(self) -> float:
        """Returns the seconds since the previous lap and starts a new one."""
        now = self._clock()
        lap = now - self._lap_started_at
        self._lap_started_at = now

        return lap
