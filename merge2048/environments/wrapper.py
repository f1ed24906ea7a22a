import gymnasium
from gymnasium import spaces
import numpy as np


class Log2Wrapper(gymnasium.ObservationWrapper):
    """
    Replaces raw tile values with their log2, so 2 -> 1.0 and 2048 -> 11.0.

    Rationale:
        Tile values grow exponentially. Fed raw to a learning agent, a board
        holding both a 2 and a 4096 spans three orders of magnitude, which
        gives unstable gradients and slow convergence. On the log scale every
        merge is a step of exactly 1.0, whatever the tile size, so 2->4 and
        1024->2048 look the same to the optimizer. Empty cells stay 0.0.

    Args:
        env (gymnasium.Env): The environment to wrap.
        policy_type (str): 'mlp' keeps the (size, size) shape, 'cnn' adds a
                           leading channel axis: (1, size, size).
    """
    def __init__(self, env, policy_type="mlp"):
        super().__init__(env)

        if policy_type not in ["mlp", "cnn"]:
            raise ValueError(f"Unknown policy_type: {policy_type}. Must be 'mlp' or 'cnn'.")

        self.policy_type = policy_type
        size = self.env.observation_space.shape[0]

        if self.policy_type == "cnn":
            self.output_shape = (1, size, size)
        else:
            self.output_shape = (size, size)

        self.observation_space = spaces.Box(
            low=0.0,
            high=32.0,  # 2^32 is far beyond any reachable tile
            shape=self.output_shape,
            dtype=np.float32
        )

    def observation(self, obs):
        processed_obs = np.zeros_like(obs, dtype=np.float32)
        positive_mask = (obs > 0)
        processed_obs[positive_mask] = np.log2(obs[positive_mask])
        return processed_obs.reshape(self.output_shape).astype(np.float32)
