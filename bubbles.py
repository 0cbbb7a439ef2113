import pygame
import os
import math
import argparse
from typing import Optional, Tuple

import bubble_engine
from bubble_engine import BubbleShooterEngine
from bubble_geometry import (
    SCREEN_WIDTH, SCREEN_HEIGHT, BUBBLE_RADIUS, BUBBLE_COLORS, DANGER_Y,
    aim_angle_from_pointer, color_index_to_rgb,
)

# Presentation only: everything that changes game state goes through
# BubbleShooterEngine (set_aim / fire / tick). This window just maps pointer
# input to those calls and draws the engine's read-only queries.
#
# DEBUG FEATURES:
# - Press 'D' key to toggle per-shot engine tracing in the console
# - Press 'R' key to restart at any time

FPS = 60
BACKGROUND_COLOR = (26, 26, 46)
AIM_LINE_COLOR = (255, 255, 255)
DANGER_LINE_COLOR = (255, 80, 80)
TEXT_COLOR = (255, 255, 255)
BARREL_LENGTH = 40
QUEUED_PREVIEW_POS = (50, 550)


class Game:
    def __init__(self, seed: Optional[int] = None):
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Bubble Shooter")
        self.clock = pygame.time.Clock()
        self.engine = BubbleShooterEngine(seed=seed)
        self.font = pygame.font.Font(None, 28)
        self._load_bubble_assets()
        # Load sound effects
        try:
            sound_path = os.path.join("assets", "sounds", "bubble_boop.wav")
            self.shoot_sound = pygame.mixer.Sound(sound_path)
        except Exception as e:
            print(f"Warning: Could not load shoot sound: {e}")
            self.shoot_sound = None

    def _create_circle_surface(self, diameter: int, color: tuple) -> pygame.Surface:
        surf = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
        r = diameter // 2
        pygame.draw.circle(surf, color, (r, r), r)
        pygame.draw.circle(surf, (255, 255, 255), (r, r), r, 2)
        return surf

    def _load_bubble_assets(self):
        # Map color indices (0..5) to filenames by convention
        color_names = ["coral", "turquoise", "sky", "salmon", "mint", "yellow"]
        assets_dir = os.path.join("assets", "bubbles")
        diameter = BUBBLE_RADIUS * 2
        self.bubble_images = {}
        for idx, rgb in enumerate(BUBBLE_COLORS):
            name = color_names[idx] if idx < len(color_names) else f"color_{idx}"
            path = os.path.join(assets_dir, f"{name}.png")
            try:
                img = pygame.image.load(path).convert_alpha()
                img = pygame.transform.smoothscale(img, (diameter, diameter))
            except Exception:
                img = self._create_circle_surface(diameter, rgb)
            self.bubble_images[idx] = img

    def handle_event(self, event) -> bool:
        if event.type == pygame.QUIT:
            return False
        elif event.type == pygame.MOUSEMOTION:
            self.engine.set_aim(aim_angle_from_pointer(event.pos[0], SCREEN_WIDTH))
        elif event.type == pygame.MOUSEBUTTONDOWN:
            # Fire on left button down only
            if getattr(event, 'button', 1) == 1 and self.engine.fire():
                if self.shoot_sound:
                    self.shoot_sound.play()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_d:  # Press 'D' to toggle debug mode
                bubble_engine.DEBUG_ENGINE = not bubble_engine.DEBUG_ENGINE
                print(f"Debug mode {'enabled' if bubble_engine.DEBUG_ENGINE else 'disabled'}")
            elif event.key == pygame.K_r:
                self.engine.reset()
        return True

    def handle_events(self) -> bool:
        for event in pygame.event.get():
            if not self.handle_event(event):
                return False
        return True

    def update(self):
        return self.engine.tick()

    def draw_bubble(self, x: float, y: float, color: int):
        img = self.bubble_images.get(color)
        if img is not None:
            self.screen.blit(img, img.get_rect(center=(int(x), int(y))))
        else:
            pygame.draw.circle(self.screen, color_index_to_rgb(color), (int(x), int(y)), BUBBLE_RADIUS)

    def draw(self):
        self.screen.fill(BACKGROUND_COLOR)
        pygame.draw.line(self.screen, DANGER_LINE_COLOR, (0, DANGER_Y), (SCREEN_WIDTH, DANGER_Y), 1)

        for bubble in self.engine.grid.bubbles():
            self.draw_bubble(bubble.x, bubble.y, bubble.color)

        for start, end in self.engine.get_preview_path():
            pygame.draw.line(self.screen, AIM_LINE_COLOR, start, end, 2)

        shooter = self.engine.get_shooter_state()
        self._draw_barrel(shooter)
        if shooter['state'] == "idle" and shooter['loaded'] is not None:
            self.draw_bubble(shooter['x'], shooter['y'], shooter['loaded'])
        if shooter['queued'] is not None:
            self.draw_bubble(QUEUED_PREVIEW_POS[0], QUEUED_PREVIEW_POS[1], shooter['queued'])
            label = self.font.render("Next:", True, TEXT_COLOR)
            self.screen.blit(label, label.get_rect(center=(QUEUED_PREVIEW_POS[0], QUEUED_PREVIEW_POS[1] - 35)))

        projectile = self.engine.projectile
        if projectile is not None:
            self.draw_bubble(projectile.x, projectile.y, projectile.color)

        score_text = self.font.render(f"Score: {self.engine.score}", True, TEXT_COLOR)
        self.screen.blit(score_text, (SCREEN_WIDTH - score_text.get_width() - 10, SCREEN_HEIGHT - 30))
        pygame.display.flip()

    def _draw_barrel(self, shooter: dict):
        sx, sy = shooter['x'], shooter['y']
        end = (sx + math.sin(shooter['angle']) * BARREL_LENGTH, sy - math.cos(shooter['angle']) * BARREL_LENGTH)
        pygame.draw.line(self.screen, AIM_LINE_COLOR, (sx, sy), end, 3)

    def _game_over_labels(self) -> Tuple[str, Tuple[int, int, int]]:
        if self.engine.won:
            return "You Win!", (255, 215, 0)
        return "Game Over!", (255, 80, 80)

    def show_game_over_screen(self):
        font = pygame.font.Font(None, 90)
        score_font = pygame.font.Font(None, 60)
        button_font = pygame.font.Font(None, 50)

        title, color = self._game_over_labels()

        # Dark overlay background
        overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        overlay.set_alpha(180)
        overlay.fill((0, 0, 0))
        self.screen.blit(overlay, (0, 0))

        text = font.render(title, True, color)
        self.screen.blit(text, text.get_rect(center=(SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2 - 120)))
        score_text = score_font.render(f"Final Score: {self.engine.score}", True, (255, 255, 255))
        self.screen.blit(score_text, score_text.get_rect(center=(SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2 - 40)))

        # Button rectangles
        restart_rect = pygame.Rect(SCREEN_WIDTH // 2 - 200, SCREEN_HEIGHT // 2 + 60, 180, 60)
        quit_rect = pygame.Rect(SCREEN_WIDTH // 2 + 20, SCREEN_HEIGHT // 2 + 60, 180, 60)

        while True:
            # Draw buttons (with hover effect)
            mouse_pos = pygame.mouse.get_pos()

            for rect, label in [(restart_rect, "Restart"), (quit_rect, "Quit")]:
                if rect.collidepoint(mouse_pos):
                    pygame.draw.rect(self.screen, (255, 255, 255), rect, border_radius=12)
                    pygame.draw.rect(self.screen, (200, 200, 200), rect, 3, border_radius=12)
                    text_surf = button_font.render(label, True, (0, 0, 0))
                else:
                    pygame.draw.rect(self.screen, (50, 50, 50), rect, border_radius=12)
                    pygame.draw.rect(self.screen, (200, 200, 200), rect, 3, border_radius=12)
                    text_surf = button_font.render(label, True, (255, 255, 255))
                self.screen.blit(text_surf, text_surf.get_rect(center=rect.center))

            pygame.display.update()
            self.clock.tick(30)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return "quit"
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        return "quit"
                    if event.key == pygame.K_r:
                        return "restart"
                elif event.type == pygame.MOUSEBUTTONDOWN and getattr(event, 'button', 1) == 1:
                    if restart_rect.collidepoint(event.pos):
                        return "restart"
                    elif quit_rect.collidepoint(event.pos):
                        return "quit"

    def run(self, fps: int = FPS):
        running = True
        while running:
            running = self.handle_events()
            self.update()
            self.draw()
            self.clock.tick(fps)
            # If game over, present modal and handle choice
            if self.engine.game_over:
                choice = self.show_game_over_screen()
                if choice == "restart":
                    self.engine.reset()
                else:
                    running = False


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play the bubble shooter")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the layout and bubble colors")
    parser.add_argument("--fps", type=int, default=FPS, help="Frames (engine ticks) per second")
    args = parser.parse_args(argv)

    pygame.init()
    game = Game(seed=args.seed)
    game.run(fps=args.fps)
    pygame.quit()


if __name__ == "__main__":
    main()
