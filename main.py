import logging

import pygame

import config
from agents.player_bot import HintBot
from envs.errors import MoveError
from envs.maze import Maze, MazeConfig
from envs.rendering import MazeRenderer

# 方向鍵 -> (delta_col, delta_row)
KEY_MOVES = {
    pygame.K_UP: (0, -1),
    pygame.K_DOWN: (0, 1),
    pygame.K_LEFT: (-1, 0),
    pygame.K_RIGHT: (1, 0),
}


def report_move(handle):
    """移動 settle 時印出失敗原因 (撞牆、忙碌、取消都是正常情況)"""
    error = handle.exception()
    if isinstance(error, MoveError):
        print(f"移動失敗: {error}")


def build_maze(renderer):
    def on_success():
        print("恭喜！到達出口！")

    return Maze(
        MazeConfig(
            grid_size=config.GRID_SIZE,
            view_width=config.WINDOW_SIZE,
            success_callback=on_success,
            loop_probability=config.LOOP_PROBABILITY,
        ),
        renderer=renderer,
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    renderer = MazeRenderer(config.WINDOW_SIZE, config.FPS)
    maze = build_maze(renderer)
    bot = HintBot(maze) if config.PLAYER_MODE == "AI" else None

    print("遊戲開始！")
    print("--- 操作說明 ---")
    print("方向鍵 (Up/Down/Left/Right): 移動角色 (HUMAN 模式)")
    print("空白鍵 (Space): 暫停 / 繼續")
    print("R: 回到入口    N: 新迷宮    H: 顯示 / 隱藏提示")
    print("----------------")

    running = True
    paused = False
    show_hint = False

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    paused = not paused
                    print(f"遊戲{'暫停' if paused else '繼續'}")
                elif event.key == pygame.K_r:
                    maze.reset()
                    if bot is not None:
                        bot.rewind()
                elif event.key == pygame.K_n:
                    maze = build_maze(renderer)
                    bot = HintBot(maze) if config.PLAYER_MODE == "AI" else None
                elif event.key == pygame.K_h:
                    show_hint = not show_hint
                elif event.key in KEY_MOVES and bot is None and not paused:
                    handle = maze.request_move(*KEY_MOVES[event.key])
                    handle.add_done_callback(report_move)

        if not paused:
            if bot is not None:
                bot.next_move()
            maze.advance(config.STEP_SIZE)

        status = "Success!" if maze.succeeded else ""
        renderer.render(show_hint=show_hint, status_text=status)
        renderer.tick()

    renderer.close()
