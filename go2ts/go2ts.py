import os
import subprocess

from go2ts import logging as go2ts_logging, utils
from go2ts.generator import TypeScriptGenerator
from go2ts.go2ts_types import ConvertResult
from go2ts.go_parser import parse_go_files
from go2ts.thirdparty import Prettier

logger = go2ts_logging.get_logger(__name__)


class Go2TS:
    @classmethod
    def convert(
        cls,
        input_dir: str | None = None,
        output_file: str | None = None,
        *,
        config_file: str | None = None,
        config: dict | None = None,
        configure_logging: bool = True,
        console_level_override: str | None = None,
        disable_color: bool = False,
    ) -> ConvertResult:
        if config is None:
            config = utils.try_load_config(config_file)
        if configure_logging:
            go2ts_logging.configure_logging(
                config,
                console_level_override=console_level_override,
                disable_color=disable_color,
            )

        runner = cls(input_dir=input_dir, output_file=output_file, config=config)
        return runner.run()

    def __init__(self, input_dir=None, output_file=None, config=None):
        self.config = config if config is not None else utils.try_load_config()
        general = self.config.get("general", {})
        self.input_dir = input_dir if input_dir else general.get("input_dir", ".")
        self.output_file = output_file if output_file else general.get("output_file", "types.ts")

        parser_cfg = self.config.get("parser", {})
        self.skip_test_files = parser_cfg.get("skip_test_files", True)
        self.exclude_dirs = parser_cfg.get("exclude_dirs", [])
        self.format_output = general.get("format_output", False)
        self.format_timeout = general.get("format_timeout", 60)

    def run(self) -> ConvertResult:
        logger.info("Converting Go types in %s", self.input_dir)
        data = parse_go_files(
            self.input_dir,
            skip_test_files=self.skip_test_files,
            exclude_dirs=self.exclude_dirs,
        )

        generator = TypeScriptGenerator(data, self.config)
        text = generator.write(self.output_file)

        formatted = False
        if self.format_output:
            formatted = self._format(self.output_file)

        return ConvertResult(
            input_dir=os.path.abspath(self.input_dir),
            output_file=os.path.abspath(self.output_file),
            files=list(data.files),
            struct_count=len(data.structs),
            alias_count=len({alias.name for alias in data.aliases}),
            text=text,
            formatted=formatted,
        )

    def _format(self, path) -> bool:
        missing = Prettier.check_requirements()
        if missing:
            logger.warning("Cannot format %s: %s not found", path, ", ".join(missing))
            return False
        try:
            Prettier(path, timeout=self.format_timeout).format()
        except subprocess.TimeoutExpired:
            logger.warning("prettier did not finish within %ss; %s is left unformatted", self.format_timeout, path)
            return False
        except OSError:
            logger.warning("Cannot format the output", exc_info=True)  # output is still valid
            return False
        return True
