import asyncio
import json

import discord
from discord.ext import commands

import config
from binding import solve_latex, solve_lines
from infix import format_answer
from numbers_solver import solve_first
from parser import infix_to_latex, parse_numbers_line
from shell import format_ratio, parse_trial_args, run_trials

MAX_NUMBERS = 8
MAX_TRIALS = 50


def setup(bot: commands.Bot):
    # --- Per-channel search settings ---
    if not hasattr(bot, "search_configs"):
        bot.search_configs = {}
    if not hasattr(bot, "scores"):
        bot.scores = {}

    def channel_config(ctx):
        return bot.search_configs.get(ctx.channel.id, bot.default_search_config)

    def read_numbers(args: str):
        numbers = parse_numbers_line(args)
        if not numbers or len(numbers) > MAX_NUMBERS:
            return None
        if any(abs(n) > 1000 for n in numbers):
            return None
        return numbers

    # --- Solve commands ---
    @bot.command(name="solve")
    async def solve(ctx, *, args: str):
        """
        Lists every distinct way to reach the target.
        Usage: !solve <num1> <num2> ... (up to 8 numbers)
        """
        numbers = read_numbers(args)
        if numbers is None:
            await ctx.send(f"⚠️ Provide 1–{MAX_NUMBERS} whole numbers between -1000 and 1000.")
            return

        search_config = channel_config(ctx)
        try:
            lines = await asyncio.to_thread(
                solve_lines, " ".join(map(str, numbers)), config.SOLVE_LINE_LIMIT, search_config
            )
        except Exception as e:
            await ctx.send(f"⚠️ Could not solve — `{e}`")
            return

        if not lines:
            await ctx.send(f"❌ No way to make **{search_config.target}** from `{' '.join(map(str, numbers))}`.")
            return
        body = "\n".join(f"`{line}`" for line in lines)
        await ctx.send(f"💡 {len(lines)} solution(s):\n{body}")

    @bot.command(name="first")
    async def first(ctx, *, args: str):
        """
        Shows the first solution found.
        Usage: !first <num1> <num2> ...
        """
        numbers = read_numbers(args)
        if numbers is None:
            await ctx.send(f"⚠️ Provide 1–{MAX_NUMBERS} whole numbers between -1000 and 1000.")
            return

        search_config = channel_config(ctx)
        try:
            found, expr = await asyncio.to_thread(solve_first, numbers, search_config)
        except Exception as e:
            await ctx.send(f"⚠️ Could not solve — `{e}`")
            return

        if found:
            await ctx.send(f"💡 A possible solution is: `{format_answer(expr, search_config.target)}`")
        else:
            await ctx.send("⚠️ No solutions found.")

    @bot.command(name="solve_latex")
    async def solve_latex_cmd(ctx, *, args: str):
        """
        Lists the best solutions as LaTeX.
        Usage: !solve_latex <num1> <num2> ...
        """
        numbers = read_numbers(args)
        if numbers is None:
            await ctx.send(f"⚠️ Provide 1–{MAX_NUMBERS} whole numbers between -1000 and 1000.")
            return

        search_config = channel_config(ctx)
        try:
            solutions = await asyncio.to_thread(
                solve_latex, " ".join(map(str, numbers)), config.SOLVE_LINE_LIMIT, search_config
            )
        except Exception as e:
            await ctx.send(f"⚠️ Could not solve — `{e}`")
            return

        if not solutions:
            await ctx.send(f"❌ No way to make **{search_config.target}** from `{' '.join(map(str, numbers))}`.")
            return
        body = "\n".join(f"{s['latex']} = {search_config.target}" for s in solutions)
        await ctx.send(f"```latex\n{body}\n```")

    # --- Settings ---
    @bot.command(name="configure")
    @commands.has_permissions(manage_messages=True)
    async def configure(ctx, *, args: str):
        """
        Changes this channel's search settings.
        Usage: !configure <target> <nest> <sqrt> <fact> <lg> <lb> <log> <no_neg 0/1> <only_math 0/1>
        """
        parts = args.split()
        if len(parts) != 9 or not all(p.lstrip("-").isdigit() for p in parts):
            await ctx.send("⚠️ Provide 9 integers: target nest sqrt fact lg lb log no_neg only_math.")
            return
        values = [int(p) for p in parts]
        if any(v < 0 for v in values[1:]):
            await ctx.send("⚠️ Limits and flags must not be negative.")
            return
        bot.search_configs[ctx.channel.id] = config.configure(*values)
        await ctx.send(f"✅ Settings updated: `{bot.search_configs[ctx.channel.id].describe()}`")

    @bot.command(name="settings")
    async def settings(ctx):
        """Shows this channel's search settings."""
        await ctx.send(f"⚙️ `{channel_config(ctx).describe()}`")

    # --- Random trial statistics ---
    @bot.command(name="trial")
    async def trial(ctx, *, args: str):
        """
        Runs random puzzles and reports how many were solvable.
        Usage: !trial <trials> <count> <min> <max>
        """
        parsed = parse_trial_args(args)
        if parsed is None:
            await ctx.send("⚠️ Usage: `!trial <trials> <count> <min> <max>`")
            return
        trials, count, low, high = parsed
        if trials > MAX_TRIALS or count > MAX_NUMBERS:
            await ctx.send(f"⚠️ At most {MAX_TRIALS} trials of {MAX_NUMBERS} numbers.")
            return

        search_config = channel_config(ctx)
        results = await asyncio.to_thread(
            lambda: list(run_trials(trials, count, low, high, search_config))
        )
        ok = sum(1 for _, found, _ in results if found)
        await ctx.send(f"🎲 Solvable ratio {format_ratio(ok, trials)}")

    # --- LaTeX ---
    @bot.command(name="latex")
    async def latex(ctx, *, expr: str):
        """
        Converts a solution to LaTeX.
        Usage: !latex (1 + 2 + 3) * 4
        """
        await ctx.send(f"```latex\n{infix_to_latex(expr.strip())}\n```")

    # --- Leaderboard ---
    @bot.command(name="points", aliases=["leaderboard", "scores"])
    async def leaderboard(ctx):
        valid = {uid: info for uid, info in bot.scores.items() if info.get("num_score", 0) > 0}
        if not valid:
            await ctx.send("No scores yet!")
            return
        top = sorted(valid.items(), key=lambda x: x[1]["num_score"], reverse=True)[:15]
        msg = "**🔢 24 Points Leaderboard**\n" + "\n".join(
            f"{i+1}. {info.get('name', 'Unknown')}: {info['num_score']}" for i, (uid, info) in enumerate(top)
        )
        await ctx.send(msg)

    @bot.command(name="dump_scores")
    @commands.has_permissions(manage_messages=True)
    async def dump_scores_file(ctx):
        if ctx.channel.id != config.TEST_GENERAL_CHANNEL_ID:
            await ctx.send("⚠️ Cannot use this command here.")
            return
        try:
            await ctx.send(file=discord.File(config.SCORES_FILE))
            await ctx.send("✅ Scores dumped successfully.")
        except FileNotFoundError:
            await ctx.send("⚠️ No scores file found.")

    def save_scores():
        with open(config.SCORES_FILE, "w", encoding="utf-8") as f:
            json.dump(bot.scores, f, indent=2)

    bot.save_scores = save_scores

    print("✅ utils.py loaded successfully.")
