from app.avatars.identicon import avatar_seed, generate_identicon

__all__ = ["avatar_seed", "generate_identicon"]
