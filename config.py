# --- 環境設定 ---
GRID_SIZE = 15
WINDOW_SIZE = 600  # 畫面寬度 (像素)，也是連續座標的總寬度
FPS = 60
STEP_SIZE = 4  # 每個 tick 前進的連續單位

# --- 迷宮生成 ---
MIN_GRID_SIZE = 5
ENTRANCE = (0, 1)  # (col, row)
LOOP_PROBABILITY = 0.1  # 遊戲中額外打通牆壁的機率 (核心預設為 0)
MAX_GENERATION_ATTEMPTS = 10

# --- 遊戲機制 ---
ACTOR_MARGIN = 5  # 角色比格子小幾個像素
PLAYER_MODE = "HUMAN"  # 'AI' (照著 MazeCode 走) 或 'HUMAN' (手動)
MAX_EPISODE_MOVES = 200
MAX_TICKS_PER_MOVE = WINDOW_SIZE * 4  # 單次移動最多 tick 數，防止卡死

# --- ID 定義 ---
ID_PATH = 0
ID_WALL = 1
ID_PLAYER = 2

# --- 獎勵設定 ---
REWARD_GOAL = 50
REWARD_BLOCKED = -1.0
REWARD_STEP = -0.1
REWARD_TRUNCATED = -10

# --- 顏色定義 (R, G, B) ---
COLOR_BACKGROUND = (255, 185, 0)
COLOR_BLACK = (0, 0, 0)
COLOR_BLUE = (0, 0, 255)
COLOR_GREEN = (0, 200, 0)
COLOR_HINT = (255, 255, 255)

