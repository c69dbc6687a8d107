"""Command-Line Interface handler for SynthSub."""

import argparse
import logging
import os
import sys

from .config_loader import ConfigLoader
from .log_setup import level_from_name, setup_logging
from .engine import DecodingStrategy
from .media import MediaOrchestrator
from .pipeline import SubtitlePipeline
from .script_client import ScriptClient
from .segmenter import SpeechSegmenter
from .subtitle_encoder import SRTEncoder
from .exceptions import SynthSubError, ConfigurationError

logger = logging.getLogger(__name__)

API_KEY_ENV = "GEMINI_API_KEY"

class CLIHandler:
    """Parses arguments and runs the SynthSub pipeline."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="SynthSub: Generate time-aligned subtitles for synthesized narration and merge them into a video.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
        parser.add_argument(
            "-a", "--audio",
            help="Path to the narration audio file (16-bit PCM WAV)."
        )
        parser.add_argument(
            "-o", "--output-dir",
            required=True,
            help="Directory to save the subtitle file and rendered videos."
        )
        parser.add_argument(
            "-v", "--video",
            default=None,
            help="Optional video to merge the audio and subtitles into."
        )
        parser.add_argument(
            "-l", "--language",
            default=None, # Default taken from config file
            help="Two-letter language hint for recognition (e.g. 'en')."
        )
        parser.add_argument(
            "-c", "--config",
            default="config.yaml",
            help="Path to the configuration YAML file."
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        parser.add_argument(
            "--device",
            default=None, # Default taken from config
            choices=["cuda", "cpu"],
            help="Override the processing device (cuda or cpu) specified in config."
        )
        parser.add_argument(
            "--prompt",
            default=None,
            help=f"Generate a narration script for this prompt (API key read from ${API_KEY_ENV})."
        )
        return parser

    def _generate_script(self, config: dict, prompt: str, output_dir: str) -> str:
        client = ScriptClient(
            api_key=os.environ.get(API_KEY_ENV, ""),
            model=config['gemini_model'],
            timeout=config['request_timeout']
        )
        script = client.generate(prompt)
        script_path = os.path.join(output_dir, "script.txt")
        os.makedirs(output_dir, exist_ok=True)
        with open(script_path, "w", encoding="utf-8") as f:
            f.write(script)
        logger.info(f"Script saved to: {script_path}")
        return script_path

    def _build_pipeline(self, config: dict) -> SubtitlePipeline:
        # Imported here so that script-only runs do not load torch
        from .whisper_engine import WhisperEngine

        device = config['device']
        engine = WhisperEngine(
            model_name=config['whisper_model'],
            device=device,
            fp16=config['whisper_fp16']
        )
        segmenter = SpeechSegmenter(
            DecodingStrategy(beam_size=int(config['beam_size']), patience=float(config['patience']))
        )
        return SubtitlePipeline(
            engine=engine,
            segmenter=segmenter,
            encoder=SRTEncoder(drop_degenerate=config['drop_degenerate_cues']),
            media=MediaOrchestrator(ffmpeg_path=config['ffmpeg_path'])
        )

    def run(self, argv=None) -> None:
        """Parses arguments, sets up logging, loads config, and runs the pipeline."""
        args = self.parser.parse_args(argv)
        if not args.audio and not args.prompt:
            self.parser.error("at least one of --audio or --prompt is required")

        log_level = level_from_name(args.log_level)
        setup_logging(log_level=log_level, log_dir='logs', log_file='synthsub_init.log')

        try:
            config = ConfigLoader().load_config(args.config)
        except ConfigurationError as e:
            logger.critical(f"Failed to load configuration from {args.config}: {e}", exc_info=True)
            sys.exit(1)
        except FileNotFoundError:
            logger.critical(f"Configuration file not found: {args.config}")
            sys.exit(1)

        setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file=config['log_file'])
        logger.info("Logging re-configured with settings from config file.")

        if args.device:
            logger.info(f"Overriding device from config with CLI argument: {args.device}")
            config['device'] = args.device
        if args.language:
            config['language'] = args.language

        if args.audio and not os.path.isfile(args.audio):
            logger.critical(f"Input audio file not found or is not a file: {args.audio}")
            sys.exit(1)
        if args.video and not os.path.isfile(args.video):
            logger.critical(f"Input video file not found or is not a file: {args.video}")
            sys.exit(1)

        try:
            if args.prompt:
                self._generate_script(config, args.prompt, args.output_dir)

            if args.audio:
                pipeline = self._build_pipeline(config)
                base_name = os.path.splitext(os.path.basename(args.audio))[0]
                subtitle_path = os.path.join(args.output_dir, f"{base_name}.srt")
                pipeline.generate_subtitles(args.audio, subtitle_path, config['language'])

                if args.video:
                    outputs = pipeline.produce_video(args.video, args.audio, subtitle_path, args.output_dir)
                    logger.info(f"Subtitled video saved to: {outputs['subtitled']}")

            logger.info("SynthSub finished successfully.")
            sys.exit(0)

        except SynthSubError as e:
            logger.error(f"A SynthSub error occurred: {e}")
            sys.exit(1)
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            sys.exit(1)
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            sys.exit(2)

def main() -> None:
    CLIHandler().run()
