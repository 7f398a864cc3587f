class MazeError(Exception):
    """所有迷宮錯誤的基底"""


class InvalidSizeError(MazeError):
    """迷宮尺寸太小，或入口放不進去 (建構時致命)"""


class UnsolvableMazeError(MazeError):
    """入口到出口區沒有路。代表生成器的保證被破壞，屬於內部錯誤"""


class MoveError(MazeError):
    """移動 handle 被拒絕時的基底，屬於正常流程的一部分"""


class OutOfBoundsError(MoveError):
    """角色撞牆或走出邊界"""


class BusyError(MoveError):
    """已經有一個移動在進行中"""


class CancelledError(MoveError):
    """移動因為 reset 被取消"""
