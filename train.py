from stable_baselines3 import PPO
from envs.maze_env import MazeEnv
import config
import os


def train():
    log_dir = "./tensorboard_logs/"
    os.makedirs(log_dir, exist_ok=True)

    # 1. 建立環境 (小一點的迷宮比較容易學)
    env = MazeEnv(render_mode=None, grid_size=9)

    # 2. 定義模型 (觀測是格子陣列不是圖片，用 MlpPolicy)
    model = PPO(
        "MlpPolicy",
        env,
        verbose=1,
        learning_rate=0.0003,
        batch_size=128,
        ent_coef=0.02,  # 鼓勵探索，不然容易一直撞同一面牆
        gamma=0.99,
        n_steps=2048,
        clip_range=0.2,
        gae_lambda=0.95,
        device="auto",
        tensorboard_log=log_dir,
    )

    print(f"開始訓練... (最多 {config.MAX_EPISODE_MOVES} 步/回合)")

    # 3. 開始訓練
    model.learn(total_timesteps=200000, tb_log_name="maze_runner_ppo")

    # 4. 儲存模型
    model_path = "maze_runner_ppo"
    model.save(model_path)
    print(f"模型已儲存至 {model_path}.zip")


if __name__ == "__main__":
    train()
