import pygame
import config


class MazeRenderer:
    """被動的 renderer：只記住核心告訴它的東西，render() 時畫出來"""

    def __init__(self, window_size, fps):
        self.window_size = window_size
        self.fps = fps
        self.window = None
        self.clock = None
        self.font = None

        self.maze = None
        self.actor_pos = (0, 0)

    # --- 核心回報 ---

    def grid_built(self, maze):
        self.maze = maze
        self.actor_pos = maze.actor_position

    def actor_moved(self, x, y):
        self.actor_pos = (x, y)

    # --- 繪圖 ---

    def init_window(self):
        if self.window is None:
            pygame.init()
            pygame.display.init()
            pygame.display.set_caption("Maze Runner")
            # 增加高度給 UI
            self.window = pygame.display.set_mode(
                (self.window_size, self.window_size + 50)
            )
            self.font = pygame.font.SysFont("Arial", 20)
            self.clock = pygame.time.Clock()

    def tick(self):
        """等到下一個 frame，回傳經過的毫秒"""
        self.init_window()
        return self.clock.tick(self.fps)

    def render(self, show_hint=False, status_text=""):
        self.init_window()

        canvas = pygame.Surface((self.window_size, self.window_size + 50))
        canvas.fill(config.COLOR_BACKGROUND)

        if self.maze is not None:
            size = self.maze.cell_size

            # 出口區
            for col, row in self.maze.exit_region:
                rect = pygame.Rect(col * size, row * size, size, size)
                pygame.draw.rect(canvas, config.COLOR_GREEN, rect)

            # 牆壁
            for wall in self.maze.walls:
                rect = pygame.Rect(wall.x, wall.y, wall.size, wall.size)
                pygame.draw.rect(canvas, config.COLOR_BLACK, rect)

            if show_hint:
                self._draw_hint_path(canvas, size)

            # 角色
            actor_size = size - config.ACTOR_MARGIN
            offset = config.ACTOR_MARGIN / 2
            actor = pygame.Rect(
                round(self.actor_pos[0] + offset),
                round(self.actor_pos[1] + offset),
                actor_size,
                actor_size,
            )
            pygame.draw.rect(canvas, config.COLOR_BLUE, actor)

            self._draw_ui(canvas, show_hint, status_text)

        self.window.blit(canvas, canvas.get_rect())
        pygame.event.pump()
        pygame.display.update()

    def _draw_hint_path(self, canvas, size):
        col, row = self.maze.entrance
        points = [(col * size + size // 2, row * size + size // 2)]
        for direction in self.maze.maze_code.expand():
            dc, dr = direction.delta
            col, row = col + dc, row + dr
            points.append((col * size + size // 2, row * size + size // 2))
        if len(points) > 1:
            pygame.draw.lines(canvas, config.COLOR_HINT, False, points, 3)

    def _draw_ui(self, canvas, show_hint, status_text):
        text = status_text
        if show_hint:
            text = f"Hint: {self.maze.maze_code}  {status_text}"
        surface = self.font.render(text, True, config.COLOR_BLACK)
        canvas.blit(surface, (10, self.window_size + 15))

    def close(self):
        if self.window is not None:
            pygame.display.quit()
            pygame.quit()
            self.window = None
