import json
import os

import discord
from discord.ext import commands

import config
import numbers_bot
import utils

os.environ["DISCORD_NO_AUDIO"] = "1"

intents = discord.Intents.default()
intents.message_content = True
bot = commands.Bot(command_prefix="!", intents=intents)

# === Shared state ===
bot.default_search_config = config.load_search_config()
try:
    with open(config.SCORES_FILE, "r", encoding="utf-8") as f:
        bot.scores = json.load(f)
except FileNotFoundError:
    bot.scores = {}
except json.JSONDecodeError:
    print(f"⚠️ {config.SCORES_FILE} is not valid JSON; starting with empty scores.")
    bot.scores = {}

# === Extensions ===
utils.setup(bot)
numbers_bot.setup(bot)


@bot.event
async def on_ready():
    print(f"✅ Logged in as {bot.user} (id: {bot.user.id})")
    print(f"⚙️ Default search settings: {bot.default_search_config.describe()}")

    channel = bot.get_channel(config.NUMBERS_CHANNEL_ID)
    if channel is None:
        print("⚠️ Numbers channel not found! Check NUMBERS_CHANNEL_ID.")
        return
    if channel.id not in bot.num_current:
        await bot.new_numbers_round(channel)


# === Run bot ===
if __name__ == "__main__":
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        raise SystemExit("Environment variable DISCORD_BOT_TOKEN is missing.")
    bot.run(token)
