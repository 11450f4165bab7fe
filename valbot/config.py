# valbot/config.py
import os
from dotenv import load_dotenv

load_dotenv()

DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
GUILD_ID = os.getenv("GUILD_ID")  # optional: guild-scoped command sync
RIOT_API_KEY = os.getenv("RIOT_API_KEY")

# account routing / match routing
RIOT_REGION = os.getenv("RIOT_REGION", "europe")
VAL_SHARD = os.getenv("VAL_SHARD", "eu")

LINKS_PATH = os.getenv("LINKS_PATH", "links.json")

# Rate gate: full refill every RATE_REFILL_SEC, tune to your key
RATE_CAPACITY = int(os.getenv("RATE_CAPACITY", "20"))
RATE_REFILL_SEC = float(os.getenv("RATE_REFILL_SEC", "10"))
RATE_BACKOFF_SEC = float(os.getenv("RATE_BACKOFF_SEC", "0.5"))
RIOT_RETRIES = int(os.getenv("RIOT_RETRIES", "2"))

# cache TTLs (seconds)
MATCHLIST_TTL = 30
MATCH_TTL = 60
STATIC_TTL = 3600

REGIONS = ("americas", "europe", "asia", "esports")
SHARDS = ("eu", "na", "ap", "kr", "latam", "br")

#UI-game mode -> matchInfo.queueId
QUEUES = {
  "any": None,
  "competitive": "competitive",
  "unrated": "unrated",
  "swiftplay": "swiftplay",
  "spikerush": "spikerush",
  "deathmatch": "deathmatch",
  "teamdeathmatch": "hurm",
  "escalation": "ggteam",
  "replication": "onefa",
  "premier": "premier",
}

# keyed by queueId
MODE_NAMES = {
  "competitive": "Competitive",
  "unrated": "Unrated",
  "spikerush": "Spike Rush",
  "deathmatch": "Deathmatch",
  "swiftplay": "Swiftplay",
  "hurm": "Team Deathmatch",
  "ggteam": "Escalation",
  "onefa": "Replication",
  "premier": "Premier",
}

# how many recent matches each view pulls
PROFILE_MATCHES = 10
BREAKDOWN_MATCHES = 20


def require(*names: str) -> None:
  missing = [n for n in names if not globals().get(n)]
  if missing:
    raise RuntimeError(f"Missing {', '.join(missing)} in environment")
