import click

from .chainable import LogManager, ProcessingError, ALWAYS_SECOND, RECONCILE_POLICIES, RESAMPLE_FILTERS
from .pipeline import CombineConfig, Pipeline


@click.command()
@click.argument('image_1', type=click.Path(dir_okay=False))
@click.argument('image_2', type=click.Path(dir_okay=False))
@click.argument('output', type=click.Path(dir_okay=False))
@click.option('-p', '--policy', type=click.Choice(RECONCILE_POLICIES), default=ALWAYS_SECOND,
              help='How the common resolution is chosen: always-second uses the second image size, '
                   'true-minimum uses the image with fewer pixels. Default is always-second.')
@click.option('-f', '--filter', 'resample', type=click.Choice(list(RESAMPLE_FILTERS)), default='triangle',
              help='Resize filter used when an image has to be rescaled. Default is triangle.')
@click.option('--log-dir', type=click.Path(file_okay=False), default='logs',
              help='Directory for the run log file. Default is ./logs.')
def main(image_1, image_2, output, policy, resample, log_dir):
    """Combine IMAGE_1 and IMAGE_2 into OUTPUT by alternating their pixels.

    Both inputs must use the same image format; OUTPUT is written in that format.
    """
    config = CombineConfig(
        image_1=image_1,
        image_2=image_2,
        output=output,
        policy=policy,
        resample=resample
    )

    LogManager.initialize(log_dir)
    click.echo(f'Logging initialized: {LogManager.get_log_file_path()}')

    try:
        click.echo(f'Combining {image_1} and {image_2} (policy: {policy}, filter: {resample})')
        result = Pipeline(config).run()

        click.echo(f'Output: {result.output_path} ({result.resolution[0]}x{result.resolution[1]}, {result.format_tag})')

        if result.processing_history:
            click.echo('\nProcessing Summary:')
            for step in result.processing_history:
                click.echo(f"  - {step['component']}: {step['timestamp']}")

        LogManager.log_info('CLI', 'Processing completed successfully')

    except ProcessingError as e:
        click.echo(f'Error: {str(e)}', err=True)
        click.echo(f'Log available at: {LogManager.get_log_file_path()}', err=True)
        raise click.Abort()

    finally:
        LogManager.cleanup()


if __name__ == '__main__':
    main()
