import logging
import math
from typing import Tuple

import cv2
import pygame

from pinch_tetris.config import (
    CELL_SIZE, FPS, COLORS, VIEWPORT_WIDTH, VIEWPORT_HEIGHT, HOLD_TOLERANCE,
)
from pinch_tetris.logic.board import Action, Piece
from pinch_tetris.logic.game import Game, GameState
from pinch_tetris.logic.interaction import HandInteraction, InteractionState, is_two_handed

logger = logging.getLogger(__name__)

FONT_NAME = "arial"

KEYMAP = {
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_z: Action.ROTATE_CCW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
}


def run(use_hand: bool = True, camera: int = 0, hand_draw_preview: bool = False,
        show_camera: bool = True, size: Tuple[int, int] = (VIEWPORT_WIDTH, VIEWPORT_HEIGHT)):
    pygame.init()
    pygame.display.set_caption("Pinch-Tetris")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(FONT_NAME, 12)
    big = pygame.font.SysFont(FONT_NAME, 24, bold=True)

    screen = pygame.display.set_mode(size, pygame.RESIZABLE)
    game = Game()

    hand = None
    if use_hand:
        # mediapipe is heavy; only import it when the camera is wanted
        from pinch_tetris.input.hand_input import HandController
        hand = HandController(camera=camera, draw=hand_draw_preview)

    running = True
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r:
                        logger.info("restart")
                        game.reset()
                    elif event.key in KEYMAP:
                        game.step(KEYMAP[event.key])

            w, h = screen.get_size()
            samples = hand.poll() if hand is not None else None
            game.update(pygame.time.get_ticks(), samples, w, h)

            # --- Render ---
            screen.fill(COLORS["bg"])
            draw_zones(screen, game, font)
            draw_board(screen, game)
            draw_holds(screen, game, font)
            if game.active is not None:
                draw_piece(screen, game, game.active)
            draw_rotation_circle(screen, game)
            for interaction in game.hands.values():
                draw_hand(screen, game, interaction, font)

            info = font.render(f"SCORE {game.score}   LINES {game.lines_cleared}   FPS {clock.get_fps():.0f}",
                               True, COLORS["text"])
            screen.blit(info, (30, h - 30))

            cam_frame = hand.get_last_frame() if (hand is not None and show_camera) else None
            if cam_frame is not None:
                cam_w, cam_h = CELL_SIZE * 8, CELL_SIZE * 6
                preview = cv2.cvtColor(cam_frame, cv2.COLOR_BGR2RGB)
                preview = cv2.resize(preview, (cam_w, cam_h))
                surf = pygame.image.frombuffer(preview.tobytes(), (cam_w, cam_h), 'RGB')
                screen.blit(surf, (w - cam_w - 20, h - cam_h - 20))

            if game.state is GameState.GAME_OVER:
                overlay = big.render("GAME OVER - press R", True, COLORS["text"])
                board = game.layout.board
                screen.blit(overlay, (board.x + 12, board.y + 12))

            pygame.display.flip()
            clock.tick(FPS)
    finally:
        if hand is not None:
            hand.release()
        pygame.quit()


def draw_cell(screen, x: float, y: float, color: Tuple[int, int, int], alpha: int = 255, width: int = 0):
    rect = pygame.Rect(int(x) + 2, int(y) + 2, CELL_SIZE - 4, CELL_SIZE - 4)
    if alpha >= 255:
        pygame.draw.rect(screen, color, rect, width=width, border_radius=3)
    else:
        surface = pygame.Surface(rect.size, pygame.SRCALPHA)
        surface.fill((*color, alpha))
        screen.blit(surface, rect)
        pygame.draw.rect(screen, color, rect, width=1, border_radius=3)


def draw_zones(screen, game: Game, font):
    layout = game.layout
    board = layout.board
    label = font.render("SPAWN ZONE - GRAB TO HOLD", True, COLORS["dim"])
    cx, _ = layout.spawn_zone.center
    screen.blit(label, (cx - label.get_width() / 2, layout.spawn_top + 12))

    divider = game.active.color if layout.divider_active and game.active else COLORS["frame"]
    x, y = layout.offset_x - 20, layout.spawn_bottom
    while x < board.x + board.w + 20:
        pygame.draw.line(screen, divider, (x, y), (min(x + 6, board.x + board.w + 20), y), 2)
        x += 10

    hint = font.render("PLAY ZONE - TWIST TO ROTATE", True, COLORS["dim"])
    screen.blit(hint, (board.x + 5, board.y + 4))


def draw_board(screen, game: Game):
    board = game.layout.board
    cs = game.cell_size
    for r in range(1, game.rows):
        y = board.y + r * cs
        pygame.draw.line(screen, COLORS["grid"], (board.x, y), (board.x + board.w, y))
    for c in range(1, game.cols):
        x = board.x + c * cs
        pygame.draw.line(screen, COLORS["grid"], (x, board.y), (x, board.y + board.h))
    pygame.draw.rect(screen, COLORS["frame"], pygame.Rect(board.x, board.y, board.w, board.h), width=2)

    for r, c, k in game.board.get_cells():
        draw_cell(screen, board.x + c * cs, board.y + r * cs, COLORS[k], alpha=90)


def _draw_free(screen, piece: Piece, alpha: int):
    half_w = piece.width * CELL_SIZE / 2
    half_h = piece.height * CELL_SIZE / 2
    for rr, line in enumerate(piece.shape):
        for cc, filled in enumerate(line):
            if filled:
                draw_cell(screen, piece.screen_x - half_w + cc * CELL_SIZE,
                          piece.screen_y - half_h + rr * CELL_SIZE, piece.color, alpha=alpha)


def draw_piece(screen, game: Game, piece: Piece):
    if piece.grabbed:
        _draw_free(screen, piece, alpha=150)
    elif piece.in_play_zone:
        board = game.layout.board
        for r, c in piece.cells:
            if r >= 0:
                draw_cell(screen, board.x + c * game.cell_size, board.y + r * game.cell_size,
                          piece.color, alpha=90)
    else:
        _draw_free(screen, piece, alpha=90)


def draw_rotation_circle(screen, game: Game):
    for interaction in game.hands.values():
        grab = interaction.grab
        if not interaction.is_play_zone_dragging or grab is None or grab.circle is None:
            continue
        circle = grab.circle
        cx, cy, radius = circle.center_x, circle.center_y, circle.radius
        pygame.draw.circle(screen, COLORS["grid"], (int(cx), int(cy)), int(radius), width=1)
        for i in range(4):
            a = i * math.pi / 2
            pygame.draw.circle(screen, COLORS["dim"], (int(cx + math.cos(a) * radius), int(cy + math.sin(a) * radius)), 2)
        hx = cx + math.cos(circle.angle) * radius
        hy = cy + math.sin(circle.angle) * radius
        pygame.draw.line(screen, COLORS["dim"], (cx, cy), (hx, hy))
        pygame.draw.circle(screen, COLORS["frame"], (int(hx), int(hy)), 3)
        break  # one circle is enough


def draw_holds(screen, game: Game, font):
    dragger = game.dragging_hand()
    dragged = dragger.target if dragger is not None else None
    for idx, slot in enumerate(game.holds):
        rect = pygame.Rect(slot.rect.x, slot.rect.y, slot.rect.w, slot.rect.h)
        if slot.targeted and dragged is not None:
            pygame.draw.rect(screen, dragged.color, rect, width=2)
        elif slot.kind is not None:
            pygame.draw.rect(screen, COLORS[slot.kind], rect, width=1)
        else:
            pygame.draw.rect(screen, COLORS["grid"], rect, width=1)

        title = font.render(f"HOLD {idx + 1}", True, COLORS[slot.kind] if slot.kind else COLORS["dim"])
        screen.blit(title, (rect.centerx - title.get_width() / 2, rect.y + 2))
        count = font.render(f"{len(slot.pieces)}/{slot.capacity}", True, COLORS["dim"])
        screen.blit(count, (rect.centerx - count.get_width() / 2, rect.bottom - 14))

        top = slot.top
        for piece in slot.pieces:
            if not piece.grabbed:
                _draw_free(screen, piece, alpha=90 if piece is top else 30)
        for piece in slot.pieces:
            if piece.grabbed:
                _draw_free(screen, piece, alpha=150)

        # Why a drop here would bounce
        if dragged is not None and not slot.targeted and dragger.position is not None \
                and slot.rect.contains(*dragger.position, HOLD_TOLERANCE):
            if slot.is_full:
                msg = "FULL"
            elif slot.kind is not None and slot.kind != dragged.kind:
                msg = f"{slot.kind} ONLY"
            else:
                msg = ""
            if msg:
                warn = font.render(msg, True, COLORS["warn"])
                screen.blit(warn, (rect.centerx - warn.get_width() / 2, rect.centery + 10))


def draw_hand(screen, game: Game, interaction: HandInteraction, font):
    pos = interaction.position
    if pos is None:
        return
    x, y = pos
    holding = interaction.is_holding
    color = interaction.target.color if (holding and interaction.target) else COLORS["text"]

    if interaction.target is not None:
        tx, ty = interaction.target.screen_x, interaction.target.screen_y
        pygame.draw.line(screen, color, (x, y), (tx, ty), 2 if holding else 1)
        if interaction.state is InteractionState.TARGETING:
            pygame.draw.circle(screen, interaction.target.color, (int(tx), int(ty)), 20, width=2)

    pygame.draw.line(screen, color, (x - 12, y), (x + 12, y))
    pygame.draw.line(screen, color, (x, y - 12), (x, y + 12))

    label = font.render(f"{interaction.side.upper()}_STATE: {interaction.state.name}", True, color)
    screen.blit(label, (x + 25, y - 12))
    if holding:
        if interaction.target_in_play_zone:
            other = game.hands["right" if interaction.side == "left" else "left"]
            if is_two_handed(interaction, other):
                role = "MOVE" if interaction.side == "left" else "ROTATE"
            else:
                role = "CIRCLE=ROTATE  DRAG=MOVE"
        else:
            role = "MOVING_TO_HOLD" if interaction.state is InteractionState.DRAGGING else "LOCK_ACQUIRED"
        screen.blit(font.render(role, True, color), (x + 25, y + 2))
