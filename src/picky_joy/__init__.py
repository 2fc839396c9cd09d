"""
Picky Joy - AI nutrition assistant for parents of picky eaters.

Components:
- Conversation: prompt assembly and the chat request pipeline
- Recipes: recipe extraction from assistant replies, saving and rating
- Web: FastAPI routes backed by Supabase and OpenAI
"""

__version__ = "1.0.0"
