import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import config
from envs.errors import BusyError, CancelledError, MoveError, OutOfBoundsError
from envs.maze_generator import in_exit_region

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]  # (col, row)


class MotionState(Enum):
    IDLE = "idle"
    MOVING = "moving"
    BLOCKED = "blocked"
    SUCCEEDED = "succeeded"


class MoveHandle:
    """
    一次移動請求的結果。可以 await、可以取消，移動結束時 settle：
    成功時 result() 回傳抵達的格子，失敗時丟出對應的 MoveError
    """

    def __init__(self, target, on_cancel=None):
        self.target = target
        self._on_cancel = on_cancel
        self._done = False
        self._error = None
        self._callbacks = []

    def __repr__(self):
        if not self._done:
            status = "pending"
        elif self._error is None:
            status = "resolved"
        else:
            status = f"rejected({type(self._error).__name__})"
        return f"<MoveHandle target={self.target} {status}>"

    def __await__(self):
        # 沒有自己的 event loop，單純讓出控制權直到外部 tick 把它 settle
        while not self._done:
            yield
        return self.result()

    def done(self):
        return self._done

    def resolved(self):
        return self._done and self._error is None

    def rejected(self):
        return self._done and self._error is not None

    def cancelled(self):
        return isinstance(self._error, CancelledError)

    def exception(self):
        if not self._done:
            raise RuntimeError("move has not settled yet")
        return self._error

    def result(self):
        if not self._done:
            raise RuntimeError("move has not settled yet")
        if self._error is not None:
            raise self._error
        return self.target

    def add_done_callback(self, fn):
        if self._done:
            fn(self)
        else:
            self._callbacks.append(fn)

    def cancel(self):
        """取消進行中的移動，角色回到上一個停好的格子"""
        if self._done:
            return False
        if self._on_cancel is not None:
            self._on_cancel(self)
        else:
            self._reject(CancelledError(f"move to {self.target} was cancelled"))
        return True

    def _resolve(self):
        self._settle(None)

    def _reject(self, error):
        self._settle(error)

    def _settle(self, error):
        if self._done:
            return
        self._done = True
        self._error = error
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            fn(self)


@dataclass(frozen=True)
class TickResult:
    """advance() 每個 tick 的回報"""

    state: MotionState
    cell: Cell
    position: Tuple[int, int]
    arrived: bool = False
    success: bool = False
    error: Optional[MoveError] = None


class MotionController:
    """
    角色的移動狀態機。格子座標 (cell) 只在移動完成時更新，
    連續座標 (position) 每個 tick 前進 step_size，撞牆時回到 cell
    """

    def __init__(
        self,
        maze,
        cell_size,
        entrance=config.ENTRANCE,
        on_success=None,
        on_position_changed=None,
    ):
        self.maze = maze
        self.grid_size = maze.shape[0]
        self.cell_size = cell_size
        self.entrance = entrance
        self.on_success = on_success
        self.on_position_changed = on_position_changed

        self.state = MotionState.IDLE
        self.succeeded = False
        self.cell = entrance
        self.position = self.to_position(entrance)
        self.target_cell = None
        self._handle = None

    # ------------------------------------------------------------------
    # 座標轉換與碰撞
    # ------------------------------------------------------------------

    def to_position(self, cell):
        col, row = cell
        return col * self.cell_size, row * self.cell_size

    def containing_cell(self, position):
        x, y = position
        return x // self.cell_size, y // self.cell_size

    def is_blocked(self, cell):
        """格子在邊界外或是牆壁"""
        col, row = cell
        if not (0 <= col < self.grid_size and 0 <= row < self.grid_size):
            return True
        return self.maze[row, col] == config.ID_WALL

    def is_out_of_bounds(self):
        return self.is_blocked(self.containing_cell(self.position))

    # ------------------------------------------------------------------
    # 操作
    # ------------------------------------------------------------------

    def request_move(self, delta_col, delta_row):
        """
        要求角色移動 (delta_col, delta_row) 格。handle 會在之後的 tick settle。
        例外：已經在移動時回傳的 handle 在 return 前就已經以 BusyError 拒絕
        (同步 settle)，因為它從未開始移動；進行中的移動不受影響
        """
        col, row = self.cell
        target = (col + delta_col, row + delta_row)

        if self.state is MotionState.MOVING:
            handle = MoveHandle(target)
            logger.debug("move to %s rejected, already moving to %s", target, self.target_cell)
            handle._reject(BusyError(f"already moving to {self.target_cell}"))
            return handle

        handle = MoveHandle(target, on_cancel=self._cancel)
        self._handle = handle
        self.target_cell = target
        self.state = MotionState.MOVING
        return handle

    def advance(self, step_size=config.STEP_SIZE):
        """每個外部 tick 呼叫一次：先走 x 軸再走 y 軸，每次前進後檢查碰撞"""
        if step_size <= 0:
            raise ValueError(f"step size must be positive, got {step_size}")

        if self.state is not MotionState.MOVING:
            return TickResult(self.state, self.cell, self.position)

        x, y = self.position
        target_x, target_y = self.to_position(self.target_cell)

        # 先對齊 x 再對齊 y，不會超過目標
        if x != target_x:
            x += min(step_size, abs(target_x - x)) * (1 if x < target_x else -1)
        elif y != target_y:
            y += min(step_size, abs(target_y - y)) * (1 if y < target_y else -1)

        if (x, y) != self.position:
            self._set_position((x, y))

        if self.is_out_of_bounds():
            return self._block()

        if self.position == (target_x, target_y):
            return self._arrive()

        return TickResult(MotionState.MOVING, self.cell, self.position)

    def reset(self):
        """任何狀態都可以呼叫：回到入口，進行中的移動以 CancelledError 拒絕"""
        handle = self._handle
        self._handle = None
        self.target_cell = None
        self.state = MotionState.IDLE
        self.cell = self.entrance
        self._set_position(self.to_position(self.entrance))
        if handle is not None:
            handle._reject(CancelledError("move cancelled by reset"))

    # ------------------------------------------------------------------
    # 內部狀態轉換
    # ------------------------------------------------------------------

    def _rest_state(self):
        return MotionState.SUCCEEDED if self.succeeded else MotionState.IDLE

    def _set_position(self, position):
        self.position = position
        if self.on_position_changed is not None:
            self.on_position_changed(*position)

    def _finish_move(self):
        handle = self._handle
        self._handle = None
        self.target_cell = None
        self.state = self._rest_state()
        return handle

    def _block(self):
        target = self.target_cell
        logger.debug("actor blocked moving from %s to %s", self.cell, target)

        # 回到上一個停好的格子，不留下半途的座標
        self._set_position(self.to_position(self.cell))
        handle = self._finish_move()

        error = OutOfBoundsError(f"move from {self.cell} to {target} hit a wall or left the grid")
        result = TickResult(MotionState.BLOCKED, self.cell, self.position, error=error)
        handle._reject(error)
        return result

    def _arrive(self):
        self.cell = self.target_cell
        handle = self._finish_move()

        success = not self.succeeded and in_exit_region(self.cell, self.grid_size)
        if success:
            self.succeeded = True
            self.state = MotionState.SUCCEEDED
            logger.info("actor reached the exit region at %s", self.cell)

        result = TickResult(self.state, self.cell, self.position, arrived=True, success=success)
        try:
            if success and self.on_success is not None:
                self.on_success()
        finally:
            # success callback 丟出例外時 handle 仍然要 settle
            handle._resolve()
        return result

    def _cancel(self, handle):
        if handle is not self._handle:
            handle._reject(CancelledError(f"move to {handle.target} was cancelled"))
            return
        self._set_position(self.to_position(self.cell))
        self._finish_move()
        handle._reject(CancelledError(f"move to {handle.target} was cancelled"))
