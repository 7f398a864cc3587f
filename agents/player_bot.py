import config
from envs.motion import MotionState


class HintBot:
    """照著 MazeCode 一格一格走的自動玩家 (AI 模式用)"""

    def __init__(self, maze):
        self.maze = maze
        self.plan = maze.maze_code.expand()
        self.index = 0
        self.cell = maze.entrance

    def finished(self):
        return self.index >= len(self.plan)

    def rewind(self):
        self.index = 0
        self.cell = self.maze.entrance

    def next_move(self):
        """
        角色停下來時送出下一步，移動中或已經走完回傳 None
        :return: MoveHandle 或 None
        """
        if self.maze.state is MotionState.MOVING or self.finished():
            return None

        # 玩家自己亂走過就從入口重來
        if self.maze.actor_cell != self.cell:
            self.maze.reset()
            self.rewind()

        direction = self.plan[self.index]
        dc, dr = direction.delta
        handle = self.maze.request_move(dc, dr)
        handle.add_done_callback(self._on_settled)
        return handle

    def _on_settled(self, handle):
        if handle.resolved():
            self.cell = handle.target
            self.index += 1


def run_to_exit(maze, step_size=config.STEP_SIZE, max_ticks=None):
    """
    不經過畫面直接把 bot 跑到出口
    :return: 用掉的 tick 數
    """
    if max_ticks is None:
        max_ticks = config.MAX_TICKS_PER_MOVE * max(len(maze.maze_code.expand()), 1)

    bot = HintBot(maze)
    ticks = 0
    while not bot.finished():
        if ticks >= max_ticks:
            raise RuntimeError(f"bot did not reach the exit within {max_ticks} ticks")
        bot.next_move()
        maze.advance(step_size)
        ticks += 1
    return ticks
