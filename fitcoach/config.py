import os

from dotenv import load_dotenv

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
# service role key keeps queries working under RLS; every query still filters by user_id
SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
GENERATION_MODEL = os.getenv("GENERATION_MODEL", "gpt-4.1")

# seconds
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))
NUTRITION_AI_TIMEOUT_SECONDS = float(os.getenv("NUTRITION_AI_TIMEOUT_SECONDS", "60"))

SESSION_SECRET = os.getenv("SESSION_SECRET", "change-me")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
