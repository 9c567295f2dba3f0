"""
CLI: Command Line Interface for Story Miner

支援 init-config、topics、clusters、query、brief、insights 命令，輸入為 JSONL 文章檔。
"""

import click
import logging
from pathlib import Path
from typing import Optional

from story_miner.config import StoryMinerConfig
from story_miner.engine import ContentAnalyticsEngine
from story_miner.query.ambiguity import get_ambiguity_prompt
from story_miner.storage.file_store import FileStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_engine(config: Optional[str]) -> ContentAnalyticsEngine:
    if config:
        logger.info(f"Loading config: {config}")
    return ContentAnalyticsEngine(StoryMinerConfig.load(config))


@click.group()
def cli():
    """Story Miner content analytics CLI"""
    pass


@cli.command()
@click.option('--out', default='config.example.yaml', help='Output config file path')
def init_config(out: str):
    """產生範本設定檔"""

    example_path = Path(__file__).parent.parent / 'config.example.yaml'

    if example_path.exists():
        with open(example_path, 'r', encoding='utf-8') as f:
            content = f.read()
    else:
        # Minimal fallback
        content = """# Story Miner Configuration
output_dir: "out"
topics:
  min_articles: 3
query:
  timezone: "UTC"
"""

    with open(out, 'w', encoding='utf-8') as f:
        f.write(content)

    click.echo(f"✓ Config file created: {out}")
    click.echo(f"  Edit this file and run: story-miner topics --input corpus.jsonl --config {out}")


@cli.command()
@click.option('--input', 'input_path', required=True, help='Documents JSONL file path')
@click.option('--config', default=None, help='Config YAML file path')
@click.option('--min-articles', type=int, default=None, help='Minimum supporting documents per topic')
@click.option('--emerging', is_flag=True, help='Split by recency and report trend/velocity')
@click.option('--out', default=None, help='Write topics to this JSON file (under output_dir)')
def topics(input_path: str, config: Optional[str], min_articles: Optional[int], emerging: bool, out: Optional[str]):
    """探索主題"""
    engine = build_engine(config)
    store = FileStore(engine.config.output_dir)

    try:
        documents = store.read_documents(input_path)
        if emerging:
            found = engine.emerging_topics(documents)
        else:
            found = engine.discover_topics(documents, min_articles)
    except Exception as e:
        logger.error(f"Topic discovery failed: {e}", exc_info=True)
        raise

    click.echo(f"✓ {len(found)} topics from {len(documents)} documents")
    for i, topic in enumerate(found, 1):
        kw_str = ', '.join(topic.keywords)
        click.echo(f"  {i}. {topic.name} (count={topic.count}, trend={topic.trend.value}, " +
                   f"velocity={topic.velocity:.1f}) [{kw_str}]")

    if out:
        path = store.save_report(found, out)
        click.echo(f"✓ Written topics to {path}")


@cli.command()
@click.option('--input', 'input_path', required=True, help='Documents JSONL file path')
@click.option('--config', default=None, help='Config YAML file path')
@click.option('--out', default=None, help='Write clusters to this JSON file (under output_dir)')
def clusters(input_path: str, config: Optional[str], out: Optional[str]):
    """將報導同一事件的文章分群"""
    engine = build_engine(config)
    store = FileStore(engine.config.output_dir)

    try:
        documents = store.read_documents(input_path)
        groups = engine.cluster(documents)
    except Exception as e:
        logger.error(f"Clustering failed: {e}", exc_info=True)
        raise

    click.echo(f"✓ {len(groups)} clusters from {len(documents)} documents")
    for group in groups:
        rep = group.representative
        click.echo(f"  {group.cluster_id}: size={group.size}, representative={rep.id} " +
                   f"({rep.title or rep.content[:60]})")

    if out:
        path = store.save_report(groups, out)
        click.echo(f"✓ Written clusters to {path}")


@cli.command()
@click.argument('text')
@click.option('--input', 'input_path', required=True, help='Documents JSONL file path')
@click.option('--config', default=None, help='Config YAML file path')
@click.option('--out', default=None, help='Write the query result to this JSON file (under output_dir)')
@click.option('--save-matches', default=None, help='Write matching documents to this JSONL file (under output_dir)')
def query(text: str, input_path: str, config: Optional[str], out: Optional[str], save_matches: Optional[str]):
    """解析自然語言查詢並過濾文章"""
    engine = build_engine(config)
    store = FileStore(engine.config.output_dir)

    try:
        documents = store.read_documents(input_path)
        result = engine.interpret(text, documents)
    except Exception as e:
        logger.error(f"Query failed: {e}", exc_info=True)
        raise

    click.echo(result.response)
    click.echo(f"  intent={result.parsed.intent.value}, clarity={result.ambiguity.clarity_score}/10")

    prompt = get_ambiguity_prompt(result.ambiguity)
    if prompt:
        click.echo(prompt)
        for option in result.ambiguity.options:
            click.echo(f"  - {option.label}: {option.description}")

    for doc in result.documents:
        click.echo(f"  [{doc.id}] {doc.category}: {doc.title or doc.content[:60]}")

    if out:
        path = store.save_report(result, out)
        click.echo(f"✓ Written query result to {path}")

    if save_matches:
        path = store.save_documents(result.documents, save_matches)
        click.echo(f"✓ Written {len(result.documents)} matching documents to {path}")


@cli.command()
@click.option('--input', 'input_path', required=True, help='Documents JSONL file path')
@click.option('--config', default=None, help='Config YAML file path')
@click.option('--out', default=None, help='Write the scores to this JSON file (under output_dir)')
def brief(input_path: str, config: Optional[str], out: Optional[str]):
    """文章集合的新穎度 / 多樣性評分"""
    engine = build_engine(config)
    store = FileStore(engine.config.output_dir)

    try:
        documents = store.read_documents(input_path)
        score = engine.brief_score(documents)
    except Exception as e:
        logger.error(f"Brief scoring failed: {e}", exc_info=True)
        raise

    click.echo(f"Novelty: {score.novelty_score}")
    click.echo(f"Diversity: {score.diversity_score}")
    click.echo(f"Overall: {score.overall_score}")

    if out:
        path = store.save_report(score, out)
        click.echo(f"✓ Written scores to {path}")


@cli.command()
@click.option('--input', 'input_path', required=True, help='Documents JSONL file path')
@click.option('--config', default=None, help='Config YAML file path')
@click.option('--out', default=None, help='Write insights to this JSON file (under output_dir)')
def insights(input_path: str, config: Optional[str], out: Optional[str]):
    """文集洞察：分類主導、情緒、來源多樣性、重大事件"""
    engine = build_engine(config)
    store = FileStore(engine.config.output_dir)

    try:
        documents = store.read_documents(input_path)
        found = engine.generate_insights(documents)
        frequent = engine.frequent_terms(documents)
    except Exception as e:
        logger.error(f"Insight generation failed: {e}", exc_info=True)
        raise

    click.echo(f"✓ {len(found)} insights from {len(documents)} documents")
    for insight in found:
        click.echo(f"  [{insight.type.value}] {insight.title}: {insight.description} " +
                   f"(confidence={insight.confidence:.2f})")

    if frequent:
        click.echo("Frequent terms: " + ', '.join(f"{t.name} ({t.count})" for t in frequent))

    if out:
        path = store.save_report({"insights": found, "frequent_terms": frequent}, out)
        click.echo(f"✓ Written insights to {path}")


if __name__ == "__main__":
    cli()
