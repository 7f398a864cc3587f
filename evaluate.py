import numpy as np
import time
import os
import datetime
from stable_baselines3 import PPO
from envs.maze_env import MazeEnv
import config
from collections import Counter


def evaluate_model(model_path="maze_runner_ppo", n_episodes=100, grid_size=9):
    """
    評估模型效能並輸出報告至檔案
    :param model_path: 模型路徑 (不含 .zip)
    :param n_episodes: 測試回合數
    :param grid_size: 迷宮大小 (要和訓練時一致)
    """

    # 建立 logs 資料夾
    log_dir = "evaluation_logs"
    os.makedirs(log_dir, exist_ok=True)

    # 產生報告檔名 (包含時間戳記)
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    report_filename = f"{log_dir}/eval_report_{model_path}_{timestamp}.txt"

    # 準備緩衝輸出的字串列表
    output_buffer = []

    def log(message):
        """同時印出到螢幕並存入緩衝區"""
        print(message)
        output_buffer.append(message)

    log(f"--- 開始評估模型: {model_path} ---")
    log(f"測試回合數: {n_episodes}")
    log(f"地圖尺寸: {grid_size}x{grid_size}")

    if not os.path.exists(f"{model_path}.zip"):
        log(f"錯誤: 找不到模型檔案 {model_path}.zip")
        return

    env = MazeEnv(render_mode=None, grid_size=grid_size)
    model = PPO.load(model_path)

    stats = {
        "rewards": [],
        "moves": [],
        "blocked": [],
        "ratios": [],
        "results": [],
    }

    start_time = time.time()

    for i in range(n_episodes):
        obs, info = env.reset()
        terminated = False
        truncated = False
        episode_reward = 0

        while not (terminated or truncated):
            action, _ = model.predict(obs, deterministic=True)
            obs, reward, terminated, truncated, info = env.step(action)
            episode_reward += reward

        result_type = "success" if terminated else info.get("result", "unknown")

        stats["results"].append(result_type)
        stats["moves"].append(info["moves"])
        stats["blocked"].append(info["blocked"])
        stats["rewards"].append(episode_reward)
        if terminated:
            # 和 MazeCode 的最短路徑比較
            stats["ratios"].append(info["moves"] / max(info["optimal_moves"], 1))

        if (i + 1) % 10 == 0:
            print(f"進度: {i + 1}/{n_episodes}...", end="\r")

    total_time = time.time() - start_time
    log(f"\n評估完成！耗時: {total_time:.2f} 秒\n")

    # --- 計算統計指標 ---
    results_count = Counter(stats["results"])
    total_valid = len(stats["results"])

    success = results_count.get("success", 0)
    timeout = results_count.get("timeout", 0)
    success_rate = (success / total_valid) * 100

    avg_moves = np.mean(stats["moves"])
    std_moves = np.std(stats["moves"])
    avg_blocked = np.mean(stats["blocked"])
    avg_reward = np.mean(stats["rewards"])
    avg_ratio = np.mean(stats["ratios"]) if stats["ratios"] else float("nan")

    # --- 輸出報表 ---
    log("=" * 40)
    log("       MODEL EVALUATION REPORT       ")
    log(f"       Date: {timestamp}             ")
    log("=" * 40)
    log(f"平均獎勵 (Avg Reward): {avg_reward:.2f}")
    log(f"平均步數 (Avg Moves) : {avg_moves:.2f} (±{std_moves:.2f})")
    log(f"平均撞牆 (Avg Blocked): {avg_blocked:.2f}")
    log(f"步數 / 最短路徑       : {avg_ratio:.2f}")
    log("-" * 40)
    log(f"通關率 (Success Rate) : {success_rate:.1f}%")
    log(f"  [O] 到達出口 (Success)  : {success}")
    log(f"  [T] 超時 (Timeout)      : {timeout} (上限 {config.MAX_EPISODE_MOVES} 步)")
    log("=" * 40)

    # 寫入檔案
    with open(report_filename, "w", encoding="utf-8") as f:
        f.write("\n".join(output_buffer))

    print(f"\n報告已儲存至: {report_filename}")

    env.close()


if __name__ == "__main__":
    evaluate_model(model_path="maze_runner_ppo", n_episodes=1000)
