"""Interactive generation session.

Walks a user through one run: pick a template or start fresh, point at a
source CSV, configure every column, choose how many records to write and
where, and optionally save the configuration as a template. All questions go
through a PromptProvider so the flow can be driven by a script in tests.

Typical usage example:
    session = GenerationSession(
        prompts=ConsolePromptProvider(),
        store=JsonTemplateStore('config.json'),
    )
    exit_code = session.run(source_arg='customers.csv')
"""

import sys
from pathlib import Path
from typing import List, Optional, Tuple

from csvgen.column_builder import (
    DEFAULT_LENGTH,
    DEFAULT_MAX,
    DEFAULT_MIN,
    DEFAULT_PREFIX,
    DEFAULT_PREFIX_LENGTH,
    DEFAULT_START,
    DEFAULT_STEP,
    BuildParams,
    Strategy,
    build_config,
    parse_list_input,
)
from csvgen.csv_io import SourceTable, read_source_table, write_output_table
from csvgen.errors import ConfigError, NoSourceValuesError, ReadError, SourceNotFoundError
from csvgen.logsetup import get_logger
from csvgen.prompts import Choice, PromptProvider, Question, QuestionKind, require_non_empty, require_positive
from csvgen.strategies import RNG, GeneratorConfig
from csvgen.synthesizer import column_names, synthesize
from csvgen.template_store import Template, TemplateStore
from csvgen.value_pool import extract_pool, sample_values


logger = get_logger(__name__)

RECORD_COUNT_OPTIONS = [100, 500, 1000, 2000, 5000, 10000]
DEFAULT_OUTPUT_PATH = 'output.csv'

_YES_NO = [Choice('Yes', True), Choice('No', False)]
_NO_YES = [Choice('No', False), Choice('Yes', True)]


class GenerationSession:
    """One interactive run of the generator.

    Attributes:
        prompts: Provider answering the session's questions.
        store: Template store offering and receiving templates.
        rng: Random source for the synthesizer (None = unseeded).
        encoding: Encoding for the output file.
        source_encoding: Encoding for the source file.
    """

    def __init__(
        self,
        prompts: PromptProvider,
        store: TemplateStore,
        rng: Optional[RNG] = None,
        encoding: str = 'utf-8',
        source_encoding: str = 'utf-8-sig'
    ) -> None:
        self.prompts = prompts
        self.store = store
        self.rng = rng
        self.encoding = encoding
        self.source_encoding = source_encoding

    def run(self, source_arg: Optional[str] = None) -> int:
        """Run the session from template choice to optional template save.

        Args:
            source_arg: Source CSV path given on the command line, if any.

        Returns:
            Exit code (0 for success, 1 if the source could not be read).
        """
        template = self.choose_template(self.store.load())

        if template is not None:
            source_path = template.source_file
            self.prompts.tell(f"Using source file from template: {source_path}")
        elif source_arg:
            source_path = source_arg
            self.prompts.tell(f"Using source CSV file from command-line argument: {source_path}")
        else:
            source_path = self.prompts.ask(Question(
                key='source_path',
                message='Enter path to source CSV file:',
                validate=_require_existing_file,
            ))

        try:
            table = read_source_table(source_path, encoding=self.source_encoding)
        except SourceNotFoundError:
            print(f"File not found: {source_path}", file=sys.stderr)
            return 1
        except ReadError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if template is not None:
            configs, num_records, include_header = self.apply_template(template, table)
        else:
            configs = [self.configure_column(table, header) for header in table.columns]
            num_records = self.ask_record_count()
            include_header = self.ask_include_header()

        records = synthesize(configs, num_records, self.rng)

        output_path = self.prompts.ask(Question(
            key='output_path',
            message='Enter path for output CSV file:',
            default=DEFAULT_OUTPUT_PATH,
            validate=require_non_empty,
        ))
        write_output_table(
            records,
            column_names(configs),
            output_path,
            include_header=include_header,
            encoding=self.encoding,
        )
        self.prompts.tell(f"Successfully generated {num_records} records to {output_path}")

        if template is None:
            self.offer_save(source_path, configs, num_records, include_header)

        return 0

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def choose_template(self, templates: List[Template]) -> Optional[Template]:
        """Ask whether to reuse a saved template; None means a new configuration."""
        if not templates:
            return None

        choices = [Choice('Create new configuration', None)]
        choices.extend(
            Choice(f"Template: {t.name} ({t.source_file})", t) for t in templates
        )
        template = self.prompts.ask(Question(
            key='template',
            message='Do you want to use a saved template or create a new configuration?',
            kind=QuestionKind.CHOICE,
            choices=choices,
            default=0,
        ))

        if template is not None:
            self.prompts.tell(f"Using template: {template.name}")
        return template

    def apply_template(
        self,
        template: Template,
        table: SourceTable
    ) -> Tuple[List[GeneratorConfig], int, bool]:
        """Take a template's settings, optionally editing some columns.

        An edited column drops its old configuration and moves to the end, so
        output columns follow the order in which they were configured.

        Returns:
            Tuple of (column configurations, record count, include header).
        """
        configs = list(template.column_configs)

        missing = [name for name in template.column_names() if name not in table.columns]
        if missing:
            logger.warning(
                "Template '%s' configures columns absent from %s: %s",
                template.name, table.path, ', '.join(missing)
            )
            self.prompts.tell(
                f"Note: columns not in the current source file: {', '.join(missing)}"
            )

        edit = self.prompts.ask(Question(
            key='edit',
            message='Do you want to edit any column configurations?',
            kind=QuestionKind.CHOICE,
            choices=_NO_YES,
            default=0,
        ))

        if edit:
            headers = self.prompts.ask(Question(
                key='edit_columns',
                message='Select columns to edit:',
                kind=QuestionKind.MULTI_CHOICE,
                choices=[Choice(h, h) for h in table.columns],
            ))
            for header in headers:
                config = self.configure_column(table, header)
                configs = [existing for existing in configs if existing.header != header]
                configs.append(config)

        return configs, template.num_records, template.include_header

    def offer_save(
        self,
        source_path: str,
        configs: List[GeneratorConfig],
        num_records: int,
        include_header: bool
    ) -> bool:
        """Offer to save the configuration as a template.

        Returns:
            True if a template was saved.
        """
        save = self.prompts.ask(Question(
            key='save',
            message='Do you want to save this configuration as a template for future use?',
            kind=QuestionKind.CHOICE,
            choices=_YES_NO,
            default=0,
        ))
        if not save:
            return False

        name = self.prompts.ask(Question(
            key='template_name',
            message='Enter a name for this template:',
            validate=lambda answer: "Name cannot be empty" if not answer.strip() else None,
        )).strip()

        template = Template(
            name=name,
            source_file=str(source_path),
            column_configs=list(configs),
            num_records=num_records,
            include_header=include_header,
        )

        if self.store.save(template):
            self.prompts.tell(f"Configuration '{name}' saved successfully.")
            return True

        print(f"Error saving configuration '{name}'", file=sys.stderr)
        return False

    # ------------------------------------------------------------------
    # Column configuration
    # ------------------------------------------------------------------

    def configure_column(self, table: SourceTable, header: str) -> GeneratorConfig:
        """Ask how a column should be generated until a valid config results."""
        pool = extract_pool(table, header)

        self.prompts.tell(f"\nColumn: {header}")
        self.prompts.tell(f"Sample values: {', '.join(sample_values(table, header))}")

        while True:
            choice = self.prompts.ask(Question(
                key='generation_type',
                message='Choose generation type:',
                kind=QuestionKind.CHOICE,
                choices=[Choice(strategy.label, strategy) for strategy in Strategy],
                default=0,
            ))
            try:
                return self._build_column(header, pool, choice)
            except ConfigError as e:
                logger.info("Rejected configuration for column '%s': %s", header, e)
                self.prompts.tell(f"Invalid configuration: {e}. Please try again.")

    def _build_column(self, header: str, pool: List[str], choice: Strategy) -> GeneratorConfig:
        if choice.uses_list:
            return self._build_list_column(header, pool, choice)

        params = BuildParams()

        if choice is Strategy.NUMERIC_RANGE:
            params.min = self._ask_number('min', 'Enter minimum value:', DEFAULT_MIN)
            minimum = params.min
            params.max = self._ask_number(
                'max', 'Enter maximum value:', max(DEFAULT_MAX, minimum),
                validate=lambda answer: (
                    f"Maximum must be at least {minimum}" if answer < minimum else None
                ),
            )
        elif choice is Strategy.RANDOM_STRING:
            params.length = self._ask_length('Enter length for random strings:', DEFAULT_LENGTH)
        elif choice is Strategy.PREFIXED_RANDOM_STRING:
            params.prefix = self.prompts.ask(Question(
                key='prefix',
                message='Enter prefix for random strings:',
                default=DEFAULT_PREFIX,
            ))
            params.length = self._ask_length(
                'Enter length for random part (after prefix):', DEFAULT_PREFIX_LENGTH
            )
        elif choice is Strategy.SEQUENTIAL_NUMERIC:
            params.start = self._ask_number('start', 'Enter start value:', DEFAULT_START)
            params.step = self._ask_number('step', 'Enter step value:', DEFAULT_STEP)

        return build_config(header, pool, choice, params)

    def _build_list_column(self, header: str, pool: List[str], choice: Strategy) -> GeneratorConfig:
        use_source = choice is Strategy.FROM_SOURCE or self.prompts.ask(Question(
            key='use_source',
            message='Use values from source file?',
            kind=QuestionKind.CHOICE,
            choices=[
                Choice('Yes, use values from source file', True),
                Choice('No, I will enter custom values', False),
            ],
            default=0,
        ))

        if use_source:
            try:
                config = build_config(header, pool, choice, BuildParams(use_source=True))
            except NoSourceValuesError:
                kind = 'numeric values' if choice.numeric else 'values'
                self.prompts.tell(f"No valid {kind} found in column. Please enter custom values.")
            else:
                kind = 'numeric values' if choice.numeric else 'values'
                self.prompts.tell(f"Using {len(config.values)} unique {kind} from source column.")
                return config

        if choice is Strategy.FROM_SOURCE:
            choice = Strategy.ALPHA_FROM_LIST

        values = self._ask_list(numeric=choice.numeric)
        return build_config(header, pool, choice, BuildParams(values=values))

    def _ask_list(self, numeric: bool) -> list:
        def check(answer: str) -> Optional[str]:
            try:
                values = parse_list_input(answer, numeric=numeric)
            except ConfigError as e:
                return str(e)
            if not values:
                return "Please enter at least one value"
            return None

        answer = self.prompts.ask(Question(
            key='custom_list',
            message=(
                'Enter comma-separated list of numbers:' if numeric
                else 'Enter comma-separated list of values:'
            ),
            validate=check,
        ))
        return parse_list_input(answer, numeric=numeric)

    def _ask_number(self, key: str, message: str, default, validate=None):
        return self.prompts.ask(Question(
            key=key,
            message=message,
            kind=QuestionKind.NUMBER,
            default=default,
            validate=validate,
        ))

    def _ask_length(self, message: str, default: int) -> int:
        return self.prompts.ask(Question(
            key='length',
            message=message,
            kind=QuestionKind.INTEGER,
            default=default,
            validate=lambda answer: "Length cannot be negative" if answer < 0 else None,
        ))

    # ------------------------------------------------------------------
    # Output options
    # ------------------------------------------------------------------

    def ask_record_count(self) -> int:
        """Ask how many records to generate."""
        choices = [Choice(f"{count} records", count) for count in RECORD_COUNT_OPTIONS]
        choices.append(Choice('Custom number', None))

        count = self.prompts.ask(Question(
            key='num_records',
            message='How many records to generate?',
            kind=QuestionKind.CHOICE,
            choices=choices,
            default=1,
        ))
        if count is not None:
            return count

        return self.prompts.ask(Question(
            key='custom_records',
            message='Enter custom number of records:',
            kind=QuestionKind.INTEGER,
            validate=require_positive,
        ))

    def ask_include_header(self) -> bool:
        return self.prompts.ask(Question(
            key='include_header',
            message='Include header row?',
            kind=QuestionKind.CHOICE,
            choices=_YES_NO,
            default=0,
        ))


def _require_existing_file(answer: str) -> Optional[str]:
    if not answer.strip() or not Path(answer).is_file():
        return 'File not found. Please enter a valid file path.'
    return None
