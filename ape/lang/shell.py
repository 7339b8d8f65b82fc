"""Handles interactive/command-line mode for the Ape interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Ape interpreter shell."""
    intro = "Welcome to Ape\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations (open quotation)
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Runs an arbitrary Ape line and prints the resulting stack."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}", self.line_num, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, self.line_num)
                print(self.sess.results)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Ape interpreter!\n\n"
              "Ape is a concatenative language with two kinds of value: symbols and [quotations].\n"
              "Four primitives rewrite the stack:\n"
              "  v [q] cons     => [v q]\n"
              "  [v q] snoc     => v [q]\n"
              "  x y t f eq     => t if x equals y, else f\n"
              "  v name let     => binds name to v\n"
              "Any other word is expanded from the dictionary, or pushed as a symbol if unbound.\n\n"
              "Try it out by typing '[cons cons] cons2 let', then 'a b [] cons2'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
