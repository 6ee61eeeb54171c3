"""
Console interface for the Legal Assistant.

Usage:
    legal-assistant auto-index
    legal-assistant index penal-code/codigo-penal.pdf PENAL_CODE
    legal-assistant search "responsabilidad parental" --limit 5
    legal-assistant query "¿Qué dice el Código Civil sobre la responsabilidad parental?"
    legal-assistant generate "Demanda de alimentos" "Redactar una demanda de alimentos" COMPLAINT
    legal-assistant validate draft.txt
    legal-assistant console

Stores are in memory, so commands that read documents index the assets
directory first.
"""

import sys
import json
import shlex
import logging
import argparse
from pathlib import Path
from typing import Optional

from .config import AssistantConfig
from .container import ServiceContainer
from .errors import ValidationError
from .metrics import get_metrics_collector
from .models import DocumentCategory, QueryType, WritingDocumentType, parse_enum

logger = logging.getLogger(__name__)

NEEDS_DOCUMENTS = {"search", "query", "generate", "stats", "console"}


def _print_results(results) -> None:
    indexed = sum(1 for r in results if r.success)
    for result in results:
        marker = "OK  " if result.success else "FAIL"
        print(f"  [{marker}] {result.message}")
    print(f"Indexed {indexed}/{len(results)} documents")


def _print_sources(sources) -> None:
    if not sources:
        print("No sources found.")
        return
    print("Sources:")
    for i, ref in enumerate(sources, 1):
        print(f"  {i}. {ref.title} (relevance {ref.relevance_score:.2f})")
        for sentence in ref.relevant_sections[:2]:
            print(f"       - {sentence[:160]}")


class LegalAssistantConsole:
    """Runs CLI commands against one ServiceContainer."""

    def __init__(self, container: ServiceContainer):
        self.container = container

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def auto_index(self, root: Optional[str] = None) -> int:
        results = self.container.get_use_case("index").auto_index(root)
        if not results:
            print(f"No documents found under {root or self.container.get_config().assets_path}")
            return 0
        _print_results(results)
        return 0

    def index(self, file_path: str, category: str) -> int:
        result = self.container.get_use_case("index").execute(file_path, category)
        print(result.message)
        return 0 if result.success else 1

    def search(self, query: str, category: Optional[str] = None, limit: int = 10) -> int:
        parsed = parse_enum(DocumentCategory, category, "category") if category else None
        references = self.container.get_retriever().search(query, category=parsed, limit=limit)
        _print_sources(references)
        return 0

    def query(
        self,
        question: str,
        context: Optional[str] = None,
        query_type: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> int:
        result = self.container.get_use_case("query").execute(
            question, context=context, query_type=query_type, user_id=user_id,
        )
        if not result.success:
            print(result.message)
            return 1
        response = result.data
        print("\nAnswer:")
        print(response.answer)
        print(f"\nConfidence: {response.confidence:.0%}")
        _print_sources(response.sources)
        if response.reasoning:
            print("\nReasoning:")
            print(response.reasoning)
        return 0

    def generate(
        self,
        title: str,
        prompt: str,
        document_type: str,
        context: Optional[str] = None,
        output: Optional[str] = None,
    ) -> int:
        result = self.container.get_use_case("writing").execute(
            title, prompt, document_type, context=context,
        )
        if not result.success:
            print(result.message)
            return 1
        response = result.data
        if output:
            try:
                Path(output).write_text(response.content, encoding="utf-8")
            except OSError as e:
                print(f"Cannot write {output}: {e}")
                return 1
            print(f"Document written to {output}")
        else:
            print(f"\n{response.title}\n")
            print(response.content)
        print(f"\nSections: {len(response.sections)}  Confidence: {response.confidence:.0%}")
        _print_sources(response.sources)
        return 0

    def validate(self, file_path: str) -> int:
        path = Path(file_path)
        if not path.is_file():
            print(f"File not found: {file_path}")
            return 1
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Cannot read {file_path}: {e}")
            return 1
        result = self.container.get_use_case("validate").execute(content)
        if not result.success:
            print(result.message)
            return 1
        report = result.data
        print(f"Valid: {'yes' if report.is_valid else 'no'}")
        for label, items in (("Issues", report.issues), ("Suggestions", report.suggestions)):
            if items:
                print(f"\n{label}:")
                for item in items:
                    print(f"  {item}")
        if report.analysis:
            print("\nAnalysis:")
            print(report.analysis)
        return 0

    def types(self) -> int:
        print("Document categories:   " + ", ".join(c.value for c in DocumentCategory))
        print("Writing document types: " + ", ".join(t.value for t in WritingDocumentType))
        print("Query types:           " + ", ".join(t.value for t in QueryType))
        return 0

    def stats(self) -> int:
        store = self.container.get_document_store()
        by_category = {
            c.value: len(store.find_by_category(c)) for c in DocumentCategory
        }
        print(f"Documents: {store.count()}")
        for name, count in by_category.items():
            if count:
                print(f"  {name}: {count}")
        print(json.dumps(get_metrics_collector().get_metrics_dict(), indent=2))
        return 0

    # -------------------------------------------------------------------------
    # Interactive loop
    # -------------------------------------------------------------------------

    CONSOLE_HELP = """Commands:
  index <file_path> <category>              Index a document under the assets folder
  auto-index [root]                         Index every document in the assets folder
  search <query>                            Search indexed documents
  query <question>                          Ask a legal question
  generate <title> <prompt> <document_type> Draft a legal document
  validate <file_path>                      Validate a drafted document
  types                                     List categories and document types
  stats                                     Show document counts and metrics
  help                                      Show this help
  exit                                      Leave the console

Examples:
  index penal-code/codigo-penal.pdf PENAL_CODE
  query "¿Qué dice el Código Civil sobre la responsabilidad parental?"
  generate "Demanda de alimentos" "Redactar una demanda de alimentos" COMPLAINT"""

    def run_line(self, line: str) -> bool:
        """Execute one console line. Returns False when the console should exit."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            print(f"Error: {e}")
            return True
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        try:
            if command in ("exit", "quit"):
                return False
            elif command == "help":
                print(self.CONSOLE_HELP)
            elif command == "index" and len(args) == 2:
                self.index(*args)
            elif command == "auto-index" and len(args) <= 1:
                self.auto_index(*args)
            elif command == "search" and args:
                self.search(" ".join(args))
            elif command == "query" and args:
                self.query(" ".join(args))
            elif command == "generate" and len(args) == 3:
                self.generate(*args)
            elif command == "validate" and len(args) == 1:
                self.validate(args[0])
            elif command == "types":
                self.types()
            elif command == "stats":
                self.stats()
            else:
                print(f"Unknown command or wrong arguments: {line.strip()}")
                print('Type "help" to see available commands')
        except ValidationError as e:
            print(f"Error: {e}")
        return True

    def console(self, input_fn=input) -> int:
        print("Legal Assistant console")
        print('Type "help" to see available commands, "exit" to quit\n')
        while True:
            try:
                line = input_fn("legal-assistant> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not self.run_line(line):
                break
        print("Goodbye!")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="legal-assistant",
        description="Legal document assistant for Argentine law",
    )
    parser.add_argument("--env-file", help="Path to a .env file")
    parser.add_argument("--assets", help="Assets directory (overrides ASSETS_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("index", help="Index one document")
    p.add_argument("file_path", help="Path relative to the assets directory")
    p.add_argument("category", help="Document category, e.g. CIVIL_CODE")

    p = sub.add_parser("auto-index", help="Index every document in the assets directory")
    p.add_argument("--root", help="Directory to scan instead of the assets directory")

    p = sub.add_parser("search", help="Search indexed documents")
    p.add_argument("query")
    p.add_argument("--category")
    p.add_argument("--limit", type=int, default=10)

    p = sub.add_parser("query", help="Ask a legal question")
    p.add_argument("question")
    p.add_argument("--context")
    p.add_argument("--type", dest="query_type")
    p.add_argument("--user")

    p = sub.add_parser("generate", help="Draft a legal document")
    p.add_argument("title")
    p.add_argument("prompt")
    p.add_argument("document_type", help="e.g. COMPLAINT, CONTRACT")
    p.add_argument("--context")
    p.add_argument("--output", "-o", help="Write the drafted document to this file")

    p = sub.add_parser("validate", help="Validate a legal document")
    p.add_argument("file_path")

    sub.add_parser("types", help="List document categories and types")
    sub.add_parser("stats", help="Show document counts and metrics")
    sub.add_parser("console", help="Interactive console")
    return parser


def main(argv: Optional[list[str]] = None, container: Optional[ServiceContainer] = None) -> int:
    args = build_parser().parse_args(argv)

    if container is None:
        config = AssistantConfig.from_env(args.env_file)
        if args.assets:
            config.assets_path = args.assets
        container = ServiceContainer(config)
    config = container.get_config()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    app = LegalAssistantConsole(container)
    try:
        if args.command in NEEDS_DOCUMENTS:
            app.container.get_use_case("index").auto_index()

        if args.command == "index":
            return app.index(args.file_path, args.category)
        if args.command == "auto-index":
            return app.auto_index(args.root)
        if args.command == "search":
            return app.search(args.query, args.category, args.limit)
        if args.command == "query":
            return app.query(args.question, args.context, args.query_type, args.user)
        if args.command == "generate":
            return app.generate(
                args.title, args.prompt, args.document_type, args.context, args.output,
            )
        if args.command == "validate":
            return app.validate(args.file_path)
        if args.command == "types":
            return app.types()
        if args.command == "stats":
            return app.stats()
        return app.console()
    except ValidationError as e:
        print(f"Error: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
