import logging

from merge2048.environments.game_env import Game2048Env

logger = logging.getLogger(__name__)

'''
A baseline agent that plays by picking a random move among the ones that
change the board.
'''
class RandomAgent:

    def __init__(self, rng):
        self.rng = rng

    def choose_action(self, valid_moves_mask):
        '''
        Picks a random valid action, or None when no move changes the board.
        '''
        valid_actions = [action for action, valid in enumerate(valid_moves_mask) if valid]
        if not valid_actions:
            return None
        return valid_actions[int(self.rng.integers(len(valid_actions)))]


'''
Plays one full game with the given agent until the environment terminates
(game over, or the winning tile is reached) or no move is left.
'''
def play_game(env, agent=None, seed=None, max_steps=100000):
    observation, info = env.reset(seed=seed)
    if agent is None:
        agent = RandomAgent(env.np_random)

    steps = 0
    terminated = False
    while not terminated and steps < max_steps:
        action = agent.choose_action(info["valid_moves_mask"])
        if action is None:
            break
        observation, reward, terminated, truncated, info = env.step(action)
        steps += 1

    logger.info("Finished after %d moves: score %d, max tile %d",
                steps, info["score"], info["max_tile"])
    return info


if __name__ == "__main__":
    env = Game2048Env(render_mode="human")
    total_score = 0
    num_games = 1

    for i in range(num_games):
        print(f"Starting Game - {i+1}")
        info = play_game(env, seed=i)
        print(f"Final Score: {info['score']}  Max Tile: {info['max_tile']}")
        print("=" * 30)
        total_score += info["score"]

    print(f"\nAverage Score after {num_games} games: {total_score / num_games:.2f}")
