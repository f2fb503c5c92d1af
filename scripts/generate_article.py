#!/usr/bin/env python3
"""
Test fonctionnel de génération - Affiche l'article HTML produit par Gemini.

Utilise l'ArticleSession avec le DocumentPipeline complet:
- Markdown Repair (titres, gras, italique, listes)
- Structure Extraction (titre, meta description, plan, nombre de mots)
- Segment Split (emplacements d'images)

Usage:
    python scripts/generate_article.py [MOT-CLÉ] [--save]

Exemple:
    python scripts/generate_article.py "café de spécialité"
    python scripts/generate_article.py "café de spécialité" --save
"""
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from seo_writer.extractor import slugify
from seo_writer.logging_config import setup_logging
from seo_writer.models import ArticleConfig
from seo_writer.session import ArticleSession


async def generate(keyword: str, save: bool = False) -> None:
    """Génère un article via ArticleSession avec le pipeline complet."""
    print(f"\n{'=' * 60}")
    print(f"✍️  Génération: {keyword}")
    print(f"{'=' * 60}\n")

    session = ArticleSession()
    progress = {"chunks": 0}

    def on_update(snapshot):
        if snapshot.chunk_count > progress["chunks"]:
            progress["chunks"] = snapshot.chunk_count
            print(f"\r   ... {snapshot.word_count} mots, {len(snapshot.outline)} sections", end="")

    session.subscribe(on_update)

    try:
        await session.start(ArticleConfig(keyword=keyword))
        await session.wait()
        print()

        snapshot = session.snapshot()
        if snapshot.error:
            print(f"❌ Échec de la génération: {snapshot.error}")
            if not snapshot.html:
                return
            print("   (contenu partiel conservé)")
        else:
            print("✅ Génération réussie!\n")

        print("📊 Statistiques:")
        print(f"   - Titre: {snapshot.title or 'N/A'}")
        print(f"   - Meta description: {snapshot.description or 'N/A'}")
        print(f"   - Nombre de mots: {snapshot.word_count}")
        print(f"   - Temps de lecture: {snapshot.reading_time} min")
        print(f"   - Chunks reçus: {snapshot.chunk_count}")
        prompts = [s.prompt for s in snapshot.segments if s.kind == "placeholder"]
        print(f"   - Images suggérées: {len(prompts)}")

        print("\n🧭 Plan:")
        for entry in snapshot.outline:
            indent = "      " if entry.level == 3 else "   "
            print(f"{indent}- {entry.text}")

        html = session.serialize()
        if save:
            slug = slugify(keyword) or "article"
            samples_dir = Path("tests/samples")
            samples_dir.mkdir(parents=True, exist_ok=True)
            filepath = samples_dir / f"{slug}.html"
            filepath.write_text(html, encoding="utf-8")
            print(f"\n💾 Sauvegardé: {filepath}")
        else:
            print(f"\n{'─' * 60}")
            print("📄 CONTENU HTML:")
            print(f"{'─' * 60}\n")
            print(html)

    except Exception as e:
        print(f"❌ Erreur: {e}")
        import traceback
        traceback.print_exc()
    finally:
        await session.close()


def main():
    args = sys.argv[1:]
    save = "--save" in args
    args = [a for a in args if a != "--save"]
    keyword = args[0] if args else "specialty coffee"
    setup_logging(level="WARNING", json_output=False)
    asyncio.run(generate(keyword, save=save))


if __name__ == "__main__":
    main()
