class Actuator:
    """
    Presentation sink. Receives a grid copy and the status metadata after
    every resolved move or setup. The base class renders nothing.
    """

    def actuate(self, grid, metadata):
        pass

    def continue_game(self):
        """Dismisses a win/lose message so play can resume."""
        pass


class TerminalActuator(Actuator):
    """Prints the board and score to stdout."""

    def __init__(self, out=None):
        self.out = out
        self.score = 0

    def actuate(self, grid, metadata):
        diff = metadata["score"] - self.score
        self.score = metadata["score"]

        score_str = "Score: {}".format(self.score)
        if diff > 0:
            score_str += " (+{})".format(diff)
        self._print(score_str + "   Best: {}".format(metadata["bestScore"]))
        self._print(self.render_grid(grid))

        if metadata["terminated"]:
            if metadata["over"]:
                self._print("Game over!")
            elif metadata["won"]:
                self._print("You win! Press 'c' to keep playing or 'r' to restart.")

    def continue_game(self):
        self._print("-" * 20)

    @staticmethod
    def render_grid(grid):
        values = grid.to_array()
        width = max(4, len(str(values.max())))
        lines = []
        for row in values:
            lines.append(" ".join(str(v).rjust(width) if v else ".".rjust(width) for v in row))
        return "\n".join(lines)

    def _print(self, text):
        print(text, file=self.out)
