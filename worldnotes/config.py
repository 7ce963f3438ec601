# worldnotes/config.py

import os
from dotenv import load_dotenv

# Load environment variables from the .env file into the system environment
load_dotenv()

# Supabase project URL
SUPABASE_URL = os.getenv("SUPABASE_URL")

# Supabase key (service role key for server-side access)
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Already-authenticated user the CLI acts as; notebooks are scoped to it
WORLDNOTES_USER_ID = os.getenv("WORLDNOTES_USER_ID")
