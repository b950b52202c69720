import asyncio
import random

from discord.ext import commands

import config
from infix import render_infix
from numbers_solver import solve_first
from parser import parse_numbers_solution

CONGRATS_MESSAGES = [
    "🎉 That's correct, {user}!",
    "👏 Nice work, {user}!",
    "🔥 You nailed it, {user}!",
    "🥳 Brilliant, {user}!",
    "⚡ Speedy, {user}!",
    "🏆 You got it first, {user}!",
]


def find_solvable_selection(cfg, attempts=None, rng=random):
    """(selection, postfix) for a random draw of four 1-13 numbers, or None."""
    attempts = config.ROUND_ATTEMPTS if attempts is None else attempts
    for _ in range(attempts):
        selection = [rng.randint(1, 13) for _ in range(4)]
        found, expr = solve_first(selection, cfg)
        if found:
            return selection, expr
    return None


def setup(bot: commands.Bot):
    # --- Active puzzles and locks ---
    if not hasattr(bot, "num_current"):
        bot.num_current = {}
    if not hasattr(bot, "num_locks"):
        bot.num_locks = {}

    # --- Emoji maps ---
    NUMBER_EMOJIS = {
        1: ":one:", 2: ":two:", 3: ":three:", 4: ":four:", 5: ":five:",
        6: ":six:", 7: ":seven:", 8: ":eight:", 9: ":nine:", 10: ":number_10:",
    }

    DIGIT_EMOJIS = {str(i): f":{['zero','one','two','three','four','five','six','seven','eight','nine'][i]}:" for i in range(10)}

    # --- Helpers ---
    def to_emoji(num: int) -> str:
        return NUMBER_EMOJIS.get(num, f"**{num}**")

    def target_to_emojis(target: int) -> str:
        return " ".join(DIGIT_EMOJIS.get(d, d) for d in str(target))

    def search_config(channel_id):
        return bot.search_configs.get(channel_id, bot.default_search_config)

    # --- Core function to generate a 24 puzzle ---
    async def new_numbers_round(channel):
        cfg = search_config(channel.id)
        picked = await asyncio.to_thread(find_solvable_selection, cfg)
        if picked is None:
            bot.num_current.pop(channel.id, None)
            print(f"⚠️ No solvable round for channel {channel.id} with {cfg.describe()}")
            await channel.send(
                f"⚠️ No solvable numbers found after {config.ROUND_ATTEMPTS} draws. "
                "Change the settings with `!configure`."
            )
            return
        selection, expr = picked
        bot.num_current[channel.id] = {
            "selection": selection,
            "target": cfg.target,
            "solution": render_infix(expr),
        }
        selection_emojis = " ".join(to_emoji(n) for n in selection)
        await channel.send(
            "Make the target using every number once:\n"
            f":dart:--->{target_to_emojis(cfg.target)}<---:dart:\n"
            f"|-{selection_emojis}-|"
        )

    # --- Expose function for utils.py or commands ---
    bot.new_numbers_round = new_numbers_round

    @bot.command(name="start_numbers")
    @commands.has_permissions(manage_messages=True)
    async def start_numbers(ctx):
        await new_numbers_round(ctx.channel)

    @bot.command(name="stop_numbers")
    @commands.has_permissions(manage_messages=True)
    async def stop_numbers(ctx):
        if ctx.channel.id in bot.num_current:
            del bot.num_current[ctx.channel.id]
            await ctx.send("🛑 Numbers stopped.")

    # --- Message handler for numbers channels ---
    @bot.event
    async def on_message(message):
        if message.author.bot:
            return

        cid = message.channel.id
        if cid in bot.num_current and not message.content.startswith("!"):
            guess = message.content.strip()

            if guess.lower() in ["give up", "giveup", "skip", "next"]:
                sol = bot.num_current[cid]["solution"]
                await message.channel.send(f"💡 A possible solution was: `{sol}`")
                await new_numbers_round(message.channel)
                return

            selection = bot.num_current[cid]["selection"]
            target = bot.num_current[cid]["target"]
            cfg = search_config(cid)

            result = parse_numbers_solution(guess, selection, no_negative=cfg.no_negative)
            if result is False:
                await bot.process_commands(message)
                return
            value, normalized_guess = result

            bot.num_locks.setdefault(cid, asyncio.Lock())
            is_correct = False
            async with bot.num_locks[cid]:
                if cid not in bot.num_current:
                    return  # already solved

                if value == target:
                    is_correct = True
                    user_id = str(message.author.id)
                    existing_data = bot.scores.get(user_id, {})
                    bot.scores[user_id] = {
                        "name": message.author.display_name,
                        "num_score": existing_data.get("num_score", 0) + 1,
                    }
                    del bot.num_current[cid]

            if is_correct:
                bot.save_scores()
                congrats = random.choice(CONGRATS_MESSAGES).format(user=message.author.display_name)
                await message.channel.send(f"{congrats}\n> `{normalized_guess}` = **{target}**")
                await new_numbers_round(message.channel)
                return
            await message.add_reaction("❌")

        # Let other extensions process commands
        await bot.process_commands(message)

    print("✅ numbers_bot.py loaded successfully.")
