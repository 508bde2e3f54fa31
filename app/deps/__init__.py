# Marks ``app.deps`` as a package so ``from app.deps.auth import require_actor`` resolves.
