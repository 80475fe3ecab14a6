# Run a CHIP-8 program headless for a number of frames, then show the final screen
#
# Keys can be scripted per frame with --keys, e.g. --keys "5:q 6:q 30:w" holds the
# physical key q down during frames 5 and 6, and w during frame 30 (frames count from 0).

import sys
from os import path
import argparse
from chip8sak import Chip8
from chip8sak.constants import CHIP8SAK_VERSION, DEFAULT_BACKGROUND, DEFAULT_FOREGROUND, DEFAULT_FPS, \
    DEFAULT_IPF, DEFAULT_PITCH, DEFAULT_QUIRKS, DEFAULT_SCALE, KEYPAD_LAYOUT, QUIRKS, QUIRK_NAMES
from chip8sak.errors import Chip8SAKException
from chip8sak.display import pixels_to_text
from chip8sak.host import ImageRenderer, NullRenderer, ScriptedInput, SquareWaveAudio, TextRenderer


def parse_key_script(script):
    frames = {}
    for item in script.split():
        frame, _, keys = item.partition(':')
        frames.setdefault(int(frame), set()).update(KEYPAD_LAYOUT[k] for k in keys.lower())
    if not frames:
        return []
    return [frames.get(i, set()) for i in range(max(frames) + 1)]


def make_parser():
    parser = argparse.ArgumentParser(description="Run a CHIP-8 program without a display.")
    parser.add_argument('program', help='CHIP-8 program to run')
    parser.add_argument('--disasm', action='store_true', help='print a disassembly before running')
    parser.add_argument('-f', '--fps', type=int, default=DEFAULT_FPS, help='frames per second')
    parser.add_argument('-i', '--ipf', type=int, default=DEFAULT_IPF, help='instructions per frame')
    parser.add_argument('-n', '--frames', type=int, default=300, help='number of frames to run')
    parser.add_argument('-s', '--scale', type=int, default=DEFAULT_SCALE, help='scale factor for --png')
    parser.add_argument('-c', '--color', default='0x%08X' % DEFAULT_FOREGROUND,
                        help='foreground color (RGBA8888)')
    parser.add_argument('-b', '--background', default='0x%08X' % DEFAULT_BACKGROUND,
                        help='background color (RGBA8888)')
    parser.add_argument('-p', '--pitch', type=int, default=DEFAULT_PITCH, help='buzzer pitch in Hz')
    parser.add_argument('-q', '--quirks', default=DEFAULT_QUIRKS, choices=sorted(QUIRKS),
                        help='quirk preset')
    for name in QUIRK_NAMES:
        parser.add_argument('--' + name.replace('_', '-'), dest=name, action='store_true', default=None,
                            help='turn on the %s quirk' % name)
        parser.add_argument('--no-' + name.replace('_', '-'), dest=name, action='store_false',
                            help='turn off the %s quirk' % name)
    parser.set_defaults(**{name: None for name in QUIRK_NAMES})
    parser.add_argument('--keys', default='', help='scripted key presses, "frame:keys ..."')
    parser.add_argument('--png', help='save the final frame to this image file')
    parser.add_argument('--every', type=int, default=0, help='also print every Nth frame')
    parser.add_argument('-v', '--verbose', action='store_true', help='print run details')
    parser.add_argument('--version', action='version', version='%(prog)s ' + CHIP8SAK_VERSION)

    return parser


def main():
    parser = make_parser()
    args = parser.parse_args()

    if not path.exists(args.program):
        parser.error('Cannot find "%s"' % args.program)
    try:
        key_script = parse_key_script(args.keys)
    except (ValueError, KeyError):
        parser.error('Cannot parse key script "%s"' % args.keys)

    chip8 = Chip8()
    try:
        chip8.set_options(fps=args.fps, ipf=args.ipf, scale=args.scale,
                          foreground=args.color, background=args.background, pitch=args.pitch,
                          quirks=args.quirks, disasm=args.disasm, verbose=args.verbose,
                          **{name: getattr(args, name) for name in QUIRK_NAMES})
        chip8.load(args.program)
    except Chip8SAKException as e:
        parser.error(str(e))

    if args.png:
        renderer = ImageRenderer(fg=chip8.get_option('foreground'), bg=chip8.get_option('background'),
                                 scale=args.scale)
    elif args.every > 0:
        renderer = TextRenderer(every=args.every)
    else:
        renderer = NullRenderer()
    audio = SquareWaveAudio(pitch=chip8.get_option('pitch'))

    try:
        chip8.run(ScriptedInput(key_script), renderer, audio, frames=args.frames)
    except Chip8SAKException as e:
        print(e)
        chip8.cpu.print_registers()
        chip8.cpu.print_stack()
        sys.exit(1)

    if args.png:
        renderer.save(args.png)
        print('Saved final frame to "%s"' % args.png)
    elif renderer.last_frame is not None:
        print(pixels_to_text(renderer.last_frame))
    if args.verbose:
        print("Buzzer switched on %d times" % sum(1 for on in audio.transitions if on))


if __name__ == "__main__":
    main()
